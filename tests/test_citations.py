from citation_lens.research.citations import (
    cited_indexes,
    cited_passage,
    split_sentences,
    strip_citation_markers,
)


def test_cited_indexes_filters_out_of_range_and_duplicates():
    content = "A [2] B [1] C [2] D [9]"
    assert cited_indexes(content, ["u1", "u2", "u3"]) == [2, 1]


def test_cited_indexes_without_citations():
    assert cited_indexes("A [1]", []) == []


def test_strip_markers_with_leading_space():
    assert strip_citation_markers("It is tall[1] and old [2].") == "It is tall and old."
    assert strip_citation_markers("No markers.") == "No markers."


def test_cited_passage_picks_marked_sentence():
    content = "The tower opened in 2010. It stands 828 metres tall. [1] Construction began in 2004.[2]"
    assert cited_passage(content, 1) == "It stands 828 metres tall."
    assert cited_passage(content, 2) == "Construction began in 2004."


def test_cited_passage_falls_back_to_whole_answer():
    assert cited_passage("No markers at all [1 ]", 1) == "No markers at all [1 ]"


def test_cited_passage_with_marker_runs():
    content = "It is 828 m tall.[1][2] It opened in 2010. It cost $1.5 billion. [3]"
    assert cited_passage(content, 1) == "It is 828 m tall."
    assert cited_passage(content, 2) == "It is 828 m tall."
    assert cited_passage(content, 3) == "It cost $1.5 billion."


def test_split_sentences_keeps_markers_with_their_sentence():
    assert split_sentences("A.[1][2] B. [3] C.") == ["A.[1][2]", "B.[3]", "C."]
