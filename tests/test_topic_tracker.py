from inference.topic_tracker import find_redundancy, is_forbidden, is_redundant, normalize_question


def test_normalization_folds_award_and_media_spellings():
    assert normalize_question("Has your character won an Academy Award?") == normalize_question(
        "Has your character won an Oscar?"
    )
    assert normalize_question("Did your character originate in a TV show?") == (
        "did your character originate in a television"
    )


def test_duplicate_after_normalization_is_redundant():
    reason = find_redundancy("Has your character won an Academy Award?", ["Has your character won an Oscar?"])

    assert reason is not None


def test_two_shared_content_words_are_redundant():
    assert is_redundant("Does your character wear a black cape?", ["Does your character wear a red cape?"])


def test_more_specific_question_in_a_touched_realm_is_allowed():
    assert not is_redundant("Is your character blonde?", ["Does your character have distinctive hair?"])
    assert is_redundant("Does your character have distinctive hair?", ["Is your character blonde?"])


def test_settled_trait_key_vocabulary_is_redundant():
    reason = find_redundancy("Is your character a woman?", [], confirmed_keys={"gender"})

    assert reason == "trait key 'gender' already settled"


def test_unrelated_question_is_not_redundant():
    assert find_redundancy("Can your character fly?", ["Is your character male?"], {"gender"}) is None


def test_forbidden_phrasings():
    assert is_forbidden("Does your character have a background in finance?")
    assert is_forbidden("How old is your character?")
    assert not is_forbidden("Is your character an athlete?")
