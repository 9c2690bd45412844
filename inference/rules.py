"""
Versioned rule tables for the inference engine.

Everything here is data: word lists, lookup tables and regex patterns that the
topic tracker, trait extractor and question selector read. Extend a table here
rather than adding string checks to control flow. Bump RULES_VERSION when a
table changes meaning.
"""

RULES_VERSION = "2026.10.1"

# --- TRAIT VOCABULARY ---

TRAIT_KEYS = {
    "fictional": "true when the subject is a made-up character, false for a real person",
    "gender": "male or female",
    "species": "human, alien, robot, animal, god, ...",
    "category": "actors, athletes, musicians, politicians, historical, anime, superheroes, tv-characters, video-games",
    "origin_medium": "anime, manga, comic, video game, movie, tv, book, cartoon",
    "has_powers": "true when the subject has supernatural or superhuman abilities",
    "alignment": "hero or villain",
    "age_group": "child, teenager, adult, elderly",
    "nationality": "american, british, japanese, ...",
    "is_alive": "true when the real person is alive today",
    "has_oscar": "true when the subject has won an Academy Award",
    "publisher": "marvel or dc",
    "genre": "comedy, drama, action, ...",
    "tv_show_type": "sitcom, drama or animated",
}

KEY_ALIASES = {
    "media_origin": "origin_medium",
    "origin": "origin_medium",
    "medium": "origin_medium",
    "alive": "is_alive",
    "is_fictional": "fictional",
    "powers": "has_powers",
    "superpowers": "has_powers",
    "sex": "gender",
    "country": "nationality",
    "won_oscar": "has_oscar",
    "occupation": "category",
}

CATEGORIES = (
    "actors",
    "athletes",
    "musicians",
    "politicians",
    "historical",
    "anime",
    "superheroes",
    "tv-characters",
    "video-games",
    "other",
)

REAL_PERSON_CATEGORIES = frozenset({"actors", "athletes", "musicians", "politicians", "historical"})
FICTIONAL_CATEGORIES = frozenset({"anime", "superheroes", "tv-characters", "video-games"})

# value spellings the oracle likes to use for the same category
CATEGORY_VALUE_ALIASES = {
    "actor": "actors",
    "actress": "actors",
    "athlete": "athletes",
    "sports": "athletes",
    "musician": "musicians",
    "singer": "musicians",
    "politician": "politicians",
    "historical figure": "historical",
    "superhero": "superheroes",
    "tv character": "tv-characters",
    "tv-character": "tv-characters",
    "video game": "video-games",
    "video-game": "video-games",
    "videogame": "video-games",
}

ORIGIN_MEDIUM_ALIASES = {
    "comic book": "comic",
    "comic-book": "comic",
    "comics": "comic",
    "graphic novel": "comic",
    "video-game": "video game",
    "videogame": "video game",
    "game": "video game",
    "television": "tv",
    "tv show": "tv",
    "tv series": "tv",
    "sitcom": "tv",
    "film": "movie",
    "movies": "movie",
    "novel": "book",
    "literature": "book",
    "animated series": "cartoon",
    "animation": "cartoon",
}

FICTIONAL_ORIGIN_MEDIA = frozenset({"anime", "manga", "comic", "video game", "cartoon"})

BOOLEAN_TRAIT_KEYS = frozenset({"fictional", "has_powers", "is_alive", "has_oscar"})

CATEGORY_DEFAULT_MEDIUM = {
    "anime": "anime",
    "superheroes": "comic",
    "video-games": "video game",
    "tv-characters": "tv",
}

# medium values that count as the same origin when filtering
EQUIVALENT_MEDIA = {
    "anime": frozenset({"anime", "manga"}),
    "manga": frozenset({"anime", "manga"}),
    "tv": frozenset({"tv", "cartoon"}),
    "cartoon": frozenset({"cartoon", "tv"}),
}

NATIONALITY_GROUPS = {
    "american": ("american", "united states", "usa", "u.s."),
    "british": ("british", "united kingdom", "uk", "england", "english", "scottish", "welsh"),
    "japanese": ("japanese", "japan"),
    "french": ("french", "france"),
    "german": ("german", "germany"),
    "italian": ("italian", "italy"),
    "canadian": ("canadian", "canada"),
    "australian": ("australian", "australia"),
    "indian": ("indian", "india"),
    "argentine": ("argentine", "argentinian", "argentina"),
    "portuguese": ("portuguese", "portugal"),
    "jamaican": ("jamaican", "jamaica"),
    "south african": ("south african", "south africa"),
    "european": ("european", "europe"),
}

EUROPEAN_NATIONALITIES = frozenset({"british", "french", "german", "italian", "portuguese"})

ALIGNMENT_FACT_TERMS = {
    "villain": ("villain", "antagonist", "evil", "supervillain", "nemesis", "enemy"),
    "hero": ("hero", "protagonist", "superhero", "defender", "saves"),
}

# --- TRAIT EXTRACTION ---

BLACKLISTED_VALUES = frozenset(
    {"unknown", "unclear", "n/a", "na", "none", "null", "not_applicable", "not applicable", "{}", "", "?"}
)
BLACKLISTED_VALUE_PREFIXES = ("not_", "non_")

# a question must mention one of these before a trait with that key is accepted
TRAIT_QUESTION_KEYWORDS = {
    "fictional": ("fictional", "real", "made up", "made-up", "imaginary", "exist", "invented"),
    "gender": ("male", "female", "man", "woman", "boy", "girl", "gender", "guy", "lady"),
    "species": ("human", "alien", "robot", "animal", "creature", "species", "god", "monster", "android"),
    "category": (
        "actor", "actress", "athlete", "sport", "player", "musician", "singer", "band", "rapper",
        "politician", "president", "historical", "anime", "superhero", "tv", "television",
        "video game", "game",
    ),
    "origin_medium": (
        "anime", "manga", "comic", "video game", "game", "movie", "film", "tv", "television",
        "show", "book", "novel", "cartoon", "animated", "originate", "media",
    ),
    "has_powers": ("power", "superpower", "abilities", "ability", "magic", "supernatural", "superhuman"),
    "alignment": ("villain", "hero", "antagonist", "protagonist", "evil", "good guy", "bad guy"),
    "age_group": ("child", "kid", "teen", "teenager", "adult", "elderly", "old", "young", "age"),
    "nationality": (
        "american", "united states", "usa", "british", "united kingdom", "uk", "england", "english",
        "japanese", "japan", "french", "france", "german", "germany", "italian", "canadian",
        "european", "europe", "country", "nationality",
    ),
    "is_alive": ("alive", "living", "dead", "died", "deceased", "passed away"),
    "has_oscar": ("oscar", "academy award"),
    "publisher": ("marvel", "dc"),
    "genre": ("comedy", "comedic", "drama", "dramatic", "action", "romance", "romantic", "horror", "thriller", "sci-fi"),
    "tv_show_type": ("sitcom", "drama series", "animated"),
}

# (key, question pattern, value on a positive answer, value on a negative answer)
# first matching row for a key wins; None means the negation has no well-defined opposite
POLARITY_CORRECTIONS = (
    ("fictional", r"\b(fictional|made[- ]up|imaginary|invented)\b", "true", "false"),
    ("fictional", r"\b(real|exist|exists|existed)\b", "false", "true"),
    ("gender", r"\b(female|woman|girl|lady)\b", "female", "male"),
    ("gender", r"\b(male|man|boy|guy)\b", "male", "female"),
    ("has_powers", r"\b(super ?powers?|powers?|abilities|magic|supernatural|superhuman)\b", "true", "false"),
    ("is_alive", r"\b(dead|died|deceased|passed away)\b", "false", "true"),
    ("is_alive", r"\b(alive|living)\b", "true", "false"),
    ("has_oscar", r"\b(oscars?|academy awards?)\b", "true", "false"),
    ("alignment", r"\b(villain|antagonist|evil|bad guy)\b", "villain", None),
    ("alignment", r"\b(hero|protagonist|good guy)\b", "hero", None),
    ("species", r"(?<![\w-])(?<!\bnon )(?<!\bnot )human\b", "human", None),
)

# strict binary question shapes the rule-based pass understands on its own
RULE_BASED_PATTERNS = (
    ("species", r"^(is|was) your character (a |an )?(human|person|human being)\??$", "human", None),
    ("species", r"(?<![\w-])(?<!\bnon )(?<!\bnot )human\b", "human", None),
    ("fictional", r"^(is|was) your character (a )?(fictional|made[- ]up|imaginary)( character)?\??$", "true", "false"),
    ("fictional", r"^(is|was) your character (a )?real( person)?\??$", "false", "true"),
    ("gender", r"^(is|was) your character (a )?(male|man|boy)\??$", "male", "female"),
    ("gender", r"^(is|was) your character (a )?(female|woman|girl)\??$", "female", "male"),
    ("is_alive", r"\b(still alive|alive today|living today|currently alive)\b", "true", "false"),
    ("has_oscar", r"\bwon an? (oscar|academy award)\b", "true", "false"),
    ("has_powers", r"\bhave (super ?powers|supernatural powers)\b", "true", "false"),
    ("category", r"^(is|was) your character an? (actor|actress)\??$", "actors", None),
    ("category", r"^(is|was) your character an? athlete\??$", "athletes", None),
    ("category", r"^(is|was) your character an? (musician|singer)\??$", "musicians", None),
    ("category", r"^(is|was) your character an? politician\??$", "politicians", None),
    ("category", r"^(is|was) your character an? superhero\??$", "superheroes", None),
    ("category", r"^(is|was) your character an? historical figure\??$", "historical", None),
    ("alignment", r"\b(villain|antagonist)\b", "villain", None),
    ("tv_show_type", r"\boriginate in a sitcom\b", "sitcom", None),
    ("tv_show_type", r"\boriginate in an animated show\b", "animated", None),
    ("origin_medium", r"\boriginate in an anime or manga\b", "anime", None),
    ("origin_medium", r"\boriginate in a video game\b", "video game", None),
    ("origin_medium", r"\boriginate in a tv show\b", "tv", None),
    ("origin_medium", r"\boriginate in a comic book\b", "comic", None),
    ("publisher", r"\bpublished by marvel\b", "marvel", None),
    ("publisher", r"\bdc universe\b", "dc", None),
    ("nationality", r"^(is|was) your character american\??$", "american", None),
    ("nationality", r"\bfrom the united kingdom\b", "british", None),
    ("genre", r"\bknown for comedy\b", "comedy", None),
    ("genre", r"\baction movies\b", "action", None),
)

# --- FANTASY / REAL-PERSON GUARD ---

FANTASY_TERMS = (
    "magic", "magical", "wizard", "witch", "sorcery", "sorcerer", "spell", "spells", "dragon", "dragons",
    "vampire", "vampires", "werewolf", "zombie", "demon", "elf", "elves", "fairy", "ogre", "troll",
    "unicorn", "ghost", "mythical", "supernatural", "superpower", "superpowers", "super power",
    "super powers", "superhuman", "telekinesis", "telepathy", "teleport", "invisibility", "shapeshifting",
    "immortal", "powers", "secret identity", "alter ego", "superhero", "superheroes", "super hero",
)

FICTIONAL_ORIGIN_PHRASES = (
    "originate in an anime", "originate in a manga", "originate in a comic", "originate in a video game",
    "originate in a cartoon", "originate in an animated", "from an anime", "from a manga",
    "from a comic book", "from a video game", "from a cartoon", "japanese media",
)

# --- TOPIC TRACKING ---

STOP_WORDS = frozenset({
    "is", "your", "character", "a", "an", "the", "does", "did", "do", "are", "was", "were",
    "from", "of", "in", "to", "for", "at", "by", "with", "has", "have", "had", "be", "been",
    "this", "that", "it", "its", "they", "their", "or", "and", "not", "any", "ever",
    "primarily", "mainly", "mostly", "based", "known", "typically", "often", "usually",
    "someone", "person", "who", "what", "which", "as", "on", "one", "some", "more", "than",
    "very", "considered", "also", "there", "he", "she", "his", "her", "them", "can", "could",
})

SYNONYM_GROUPS = (
    ("hero", "superhero", "superheroes", "protagonist", "heroic"),
    ("villain", "antagonist", "evil", "villainous", "supervillain"),
    ("film", "movie", "movies", "films", "cinema"),
    ("television", "tv", "series"),
    ("anime", "manga"),
    ("comic", "comics"),
    ("game", "games", "videogame", "gaming"),
    ("male", "man", "boy", "masculine"),
    ("female", "woman", "girl", "feminine", "lady"),
    ("fictional", "imaginary", "invented", "real", "exist"),
    ("alive", "living", "dead", "deceased", "died"),
    ("powers", "power", "superpowers", "superpower", "abilities", "supernatural"),
    ("american", "america", "usa"),
    ("british", "britain", "uk", "england", "english"),
    ("oscar", "oscars", "academy"),
    ("musician", "musicians", "singer", "rapper", "band"),
    ("actor", "actress", "actors", "acting"),
    ("athlete", "athletes", "sport", "sports"),
    ("politician", "politicians", "politics", "political"),
    ("costume", "outfit", "uniform", "clothing", "clothes"),
    ("hair", "haired", "hairstyle", "haircut"),
    ("weapon", "weapons", "armed"),
    ("glasses", "spectacles", "eyewear"),
    ("team", "group", "squad"),
    ("comedy", "comedic", "funny", "humor"),
    ("drama", "dramatic", "serious"),
)

# words a settled trait key already covers
TRAIT_KEY_VOCABULARY = {
    "fictional": ("fictional", "real", "imaginary", "invented", "exist"),
    "gender": ("male", "female", "man", "woman", "boy", "girl", "gender"),
    "species": ("human", "alien", "robot", "animal", "creature", "species", "android"),
    "category": ("actor", "athlete", "musician", "politician", "historical", "superhero"),
    "origin_medium": (
        "anime", "manga", "game", "movie", "show", "comic", "cartoon", "book", "novel",
        "television", "originate", "media",
    ),
    "has_powers": ("powers", "superpowers", "abilities", "supernatural", "magic"),
    "alignment": ("villain", "hero", "antagonist", "protagonist", "evil"),
    "age_group": ("child", "teenager", "teen", "adult", "elderly", "age"),
    "nationality": (
        "american", "british", "japanese", "french", "german", "italian", "canadian", "european",
        "country", "nationality", "kingdom", "states",
    ),
    "is_alive": ("alive", "living", "dead", "died", "deceased"),
    "has_oscar": ("oscar", "academy"),
    "publisher": ("marvel", "dc", "publisher", "published"),
    "genre": ("comedy", "drama", "action", "romance", "horror", "thriller"),
    "tv_show_type": ("sitcom", "drama", "animated"),
}

# realm -> terms at each specificity level (3 = named value, 2 = sub-category, 1 = bare realm)
TOPIC_REALMS = {
    "hair": {
        1: ("hair", "hairstyle", "haircut", "haired"),
        2: ("long hair", "short hair", "curly", "spiky", "bald", "ponytail", "braid", "mohawk"),
        3: ("blonde", "blond", "brunette", "redhead", "ginger", "black hair", "white hair", "pink hair",
            "blue hair", "green hair", "silver hair", "grey hair", "gray hair", "orange hair"),
    },
    "clothing": {
        1: ("clothing", "clothes", "outfit"),
        2: ("costume", "uniform", "suit", "armor", "armour", "cape", "mask", "robe", "jacket", "hat", "hood"),
        3: ("red suit", "black suit", "blue costume", "red cape", "orange jumpsuit", "tuxedo", "lab coat"),
    },
    "accessories": {
        1: ("accessory", "accessories"),
        2: ("glasses", "sunglasses", "jewelry", "necklace", "earring", "watch", "scarf", "gloves",
            "helmet", "crown", "belt"),
        3: ("round glasses", "red scarf", "straw hat", "utility belt"),
    },
    "eyes": {
        1: ("eye", "eyes"),
        2: ("glowing eyes", "eye patch", "eyepatch", "one eye", "blind"),
        3: ("blue eyes", "green eyes", "red eyes", "brown eyes", "yellow eyes"),
    },
    "powers": {
        1: ("powers", "superpowers", "superpower", "abilities", "supernatural", "superhuman"),
        2: ("fly", "flight", "super strength", "super speed", "telekinesis", "telepathy",
            "invisibility", "teleport", "magic", "regeneration", "shapeshifting", "transform"),
        3: ("fire", "ice", "lightning", "water bending", "web", "laser", "x-ray vision"),
    },
    "weapons": {
        1: ("weapon", "weapons", "armed"),
        2: ("sword", "gun", "bow", "shield", "hammer", "staff", "knife", "blade", "whip"),
        3: ("lightsaber", "katana", "mjolnir", "vibranium shield", "batarang", "keyblade"),
    },
    "geography": {
        1: ("country", "nationality", "continent"),
        2: ("europe", "european", "asia", "asian", "africa", "african", "north america", "south america"),
        3: ("american", "united states", "british", "united kingdom", "japanese", "french", "german",
            "italian", "canadian", "australian", "brazilian"),
    },
    "awards": {
        1: ("award", "awards", "prize", "honor", "honour", "accolade"),
        2: ("oscar", "academy award", "grammy", "emmy", "golden globe", "nobel", "ballon d'or"),
    },
    "era": {
        1: ("era", "century", "decade", "historical period"),
        2: ("before 1950", "before 1900", "20th century", "21st century", "ancient", "medieval"),
        3: ("1960s", "1970s", "1980s", "1990s", "2000s", "2010s"),
    },
}

FORBIDDEN_QUESTION_PATTERNS = (
    r"\bbackground in\b",
    r"\bcareer in\b",
    r"\bwork(s|ed)? as an?\b",
    r"\bdegree in\b",
    r"\bborn (in|on) (the year )?\d{4}\b",
    r"\bhow (many|much|old|tall)\b",
)

NORMALIZATION_REPLACEMENTS = (
    (r"\bacademy awards?\b", "oscar"),
    (r"\boscars\b", "oscar"),
    (r"\b(tv|television) (show|series)\b", "television"),
    (r"\btv\b", "television"),
    (r"\bmovies?\b", "film"),
    (r"\bfilms\b", "film"),
    (r"\bcomic books?\b", "comic"),
    (r"\bcomics\b", "comic"),
    (r"\bvideo ?games?\b", "game"),
    (r"\bactress\b", "actor"),
    (r"\bunited states\b", "usa"),
    (r"\bunited kingdom\b", "uk"),
)

# --- QUESTION SELECTION ---

# (role pattern, "currently" pattern); a yes to both pins down exactly one living holder
UNIQUE_ROLES = (
    ("us_president", r"\b(president of the (united states|us|usa)|(u\.?s\.?|american|us) president)\b"),
    ("pope", r"\bpope\b"),
    ("dalai_lama", r"\bdalai lama\b"),
    ("un_secretary_general", r"\bsecretary[- ]general\b"),
    ("uk_prime_minister", r"\b(uk|british|united kingdom) prime minister\b|\bprime minister of the (uk|united kingdom)\b"),
)
CURRENT_OFFICE_PATTERN = r"\b(currently|current|in office now|right now|today)\b"

# a confirmed keyword rules out questions about its siblings
SUB_CATEGORY_CONFLICTS = {
    "american": ("british", "united kingdom", "uk", "european", "europe", "japanese"),
    "british": ("american", "usa", "united states", "japanese"),
    "united kingdom": ("american", "usa", "united states", "japanese"),
    "japanese": ("american", "british", "united kingdom", "european"),
    "european": ("american", "usa", "united states", "japanese"),
    "basketball": ("soccer", "football", "baseball", "tennis", "golf", "boxing", "hockey"),
    "soccer": ("basketball", "baseball", "tennis", "golf", "boxing", "american football"),
    "football": ("basketball", "baseball", "tennis", "golf", "boxing"),
    "baseball": ("basketball", "soccer", "football", "tennis", "golf", "boxing"),
    "tennis": ("basketball", "soccer", "football", "baseball", "golf", "boxing"),
    "golf": ("basketball", "soccer", "football", "baseball", "tennis", "boxing"),
    "boxing": ("basketball", "soccer", "football", "baseball", "tennis", "golf"),
    "rapper": ("rock", "pop singer", "country"),
    "rock": ("rapper", "hip-hop", "pop singer", "country"),
    "pop singer": ("rapper", "hip-hop", "rock", "country"),
    "sitcom": ("drama series", "animated"),
    "drama series": ("sitcom", "animated"),
    "marvel": ("dc",),
    "dc": ("marvel",),
    "dragon ball": ("naruto", "one piece"),
    "naruto": ("dragon ball", "one piece"),
    "one piece": ("dragon ball", "naruto"),
}

DEATH_PHRASES = ("died before", "died in", "death", "deceased", "passed away", "killed", "assassinated")
ALIVE_PHRASES = ("still alive", "alive today", "living today", "currently active", "currently in office")
NON_HUMAN_TERMS = ("alien", "robot", "android", "cyborg", "wings", "tail", "horns", "fangs", "claws", "non-human")
REAL_WORLD_PHRASES = (
    "won an oscar", "won a grammy", "won an emmy", "won a nobel", "academy award", "grammy award",
    "nobel prize", "elected", "served as president", "in office", "u.s. president", "us president",
    "is your character a politician", "is your character an actor", "is your character an actress",
    "is your character an athlete", "is your character a musician", "is your character a singer",
    "is your character a historical figure",
)
OBSCURE_AWARD_PATTERN = r"\b(emmy|grammy|golden globe|nobel|tony award|bafta|pulitzer)\b"
GENERIC_AWARD_PATTERN = r"\b(award|awards|prize|trophy|accolade)\b"
OSCAR_PATTERN = r"\b(oscar|academy award)\b"

# phrases that tie a question to one category; used to skip it once that category is ruled out
CATEGORY_QUESTION_TERMS = {
    "actors": ("actor", "actress", "starred in", "film role", "oscar", "academy award", "movie franchise",
               "on screen", "dramatic roles", "comedy movies", "action movies", "directed a film"),
    "athletes": ("athlete", "sport", "basketball", "soccer", "football", "baseball", "tennis", "golf",
                 "boxing", "olympic", "championship"),
    "musicians": ("musician", "singer", "band", "album", "rapper", "hip-hop", "rock", "pop singer", "grammy"),
    "politicians": ("politician", "president", "prime minister", "elected", "in office"),
    "historical": ("historical figure", "before 1950", "before 1900"),
    "anime": ("anime", "manga", "japanese media"),
    "superheroes": ("superhero", "marvel", "dc", "secret identity"),
    "tv-characters": ("tv show", "sitcom", "drama series", "animated show"),
    "video-games": ("video game",),
}

__all__ = [
    "ALIVE_PHRASES",
    "ALIGNMENT_FACT_TERMS",
    "BLACKLISTED_VALUES",
    "BLACKLISTED_VALUE_PREFIXES",
    "BOOLEAN_TRAIT_KEYS",
    "CATEGORIES",
    "CATEGORY_DEFAULT_MEDIUM",
    "CATEGORY_QUESTION_TERMS",
    "CATEGORY_VALUE_ALIASES",
    "CURRENT_OFFICE_PATTERN",
    "DEATH_PHRASES",
    "EQUIVALENT_MEDIA",
    "EUROPEAN_NATIONALITIES",
    "FANTASY_TERMS",
    "FICTIONAL_CATEGORIES",
    "FICTIONAL_ORIGIN_MEDIA",
    "FICTIONAL_ORIGIN_PHRASES",
    "FORBIDDEN_QUESTION_PATTERNS",
    "GENERIC_AWARD_PATTERN",
    "KEY_ALIASES",
    "NATIONALITY_GROUPS",
    "NON_HUMAN_TERMS",
    "NORMALIZATION_REPLACEMENTS",
    "OBSCURE_AWARD_PATTERN",
    "ORIGIN_MEDIUM_ALIASES",
    "OSCAR_PATTERN",
    "POLARITY_CORRECTIONS",
    "REAL_PERSON_CATEGORIES",
    "REAL_WORLD_PHRASES",
    "RULES_VERSION",
    "RULE_BASED_PATTERNS",
    "STOP_WORDS",
    "SUB_CATEGORY_CONFLICTS",
    "SYNONYM_GROUPS",
    "TOPIC_REALMS",
    "TRAIT_KEYS",
    "TRAIT_KEY_VOCABULARY",
    "TRAIT_QUESTION_KEYWORDS",
    "UNIQUE_ROLES",
]
