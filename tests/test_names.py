from pybtex.database import Person
import pytest

from bibrecords.core.bibliography import Name, parse_name, parse_names, split_names
from bibrecords.core.exceptions import UnparseableName


@pytest.mark.parametrize(
    ("text", "family", "given", "particle", "suffix"),
    [
        ("Poe, Edgar A.", "Poe", "Edgar A.", None, None),
        ("van Beethoven, Ludwig", "Beethoven", "Ludwig", "van", None),
        ("de la Fontaine, Jean", "Fontaine", "Jean", "de la", None),
        ("King, Jr., Martin Luther", "King", "Martin Luther", None, "Jr."),
        ("van der Berg, III, Jan", "Berg", "Jan", "van der", "III"),
        ("Melville, Herman", "Melville", "Herman", None, None),
        ("Poe,", "Poe", None, None, None),
    ],
)
def test_parse_comma_forms(
    text: str,
    family: str,
    given: str | None,
    particle: str | None,
    suffix: str | None,
) -> None:
    name = parse_name(text)

    assert name.family == family
    assert name.given == given
    assert name.particle == particle
    assert name.suffix == suffix


@pytest.mark.parametrize(
    ("text", "family", "given", "particle"),
    [
        ("Herman Melville", "Melville", "Herman", None),
        ("Edgar Allan Poe", "Poe", "Edgar Allan", None),
        ("Ludwig van Beethoven", "Beethoven", "Ludwig", "van"),
        ("Jean de la Fontaine", "Fontaine", "Jean", "de la"),
        (
            "Charles Louis Xavier Joseph de la Vallee Poussin",
            "Vallee Poussin",
            "Charles Louis Xavier Joseph",
            "de la",
        ),
        ("John Hopkins", "Hopkins", "John", None),
    ],
)
def test_parse_space_forms(
    text: str,
    family: str,
    given: str | None,
    particle: str | None,
) -> None:
    name = parse_name(text)

    assert name.family == family
    assert name.given == given
    assert name.particle == particle
    assert name.suffix is None


def test_first_word_is_never_a_particle() -> None:
    name = parse_name("van Beethoven")

    assert name.particle is None
    assert name.given == "van"
    assert name.family == "Beethoven"


def test_last_word_is_always_family() -> None:
    name = parse_name("Jan van der")

    assert name.family == "der"
    assert name.particle == "van"
    assert name.given == "Jan"


def test_single_word_is_family_only() -> None:
    name = parse_name("Aristotle")

    assert name == Name(family="Aristotle")
    assert name.given is None
    assert name.particle is None
    assert name.suffix is None


def test_single_lowercase_word_is_family() -> None:
    assert parse_name("hooks") == Name(family="hooks")


def test_space_form_detects_trailing_suffix() -> None:
    name = parse_name("Martin Luther King Jr.")

    assert name.family == "King"
    assert name.given == "Martin Luther"
    assert name.suffix == "Jr."


def test_two_word_name_with_suffix_like_last_word_keeps_it_as_family() -> None:
    name = parse_name("Henry III")

    assert name.family == "III"
    assert name.suffix is None


def test_braced_words_are_case_protected() -> None:
    name = parse_name("Jean {de la} Fontaine")

    assert name.particle is None
    assert name.family == "Fontaine"
    assert name.given == "Jean {de la}"


def test_commas_inside_braces_do_not_split() -> None:
    name = parse_name("{Barnes, Noble and Co}")

    assert name.family == "{Barnes, Noble and Co}"
    assert name.given is None


def test_whitespace_and_ties_are_normalised() -> None:
    name = parse_name("  Ludwig~van   Beethoven ")

    assert name.family == "Beethoven"
    assert name.particle == "van"
    assert name.given == "Ludwig"


@pytest.mark.parametrize("text", ["", "   ", ",", ", Ludwig"])
def test_unparseable_names_degrade_to_empty(text: str) -> None:
    name = parse_name(text)

    assert name.is_empty()
    assert name.family is None


def test_strict_parsing_raises() -> None:
    with pytest.raises(UnparseableName):
        parse_name("", strict=True)
    with pytest.raises(UnparseableName):
        Name.parse(", Ludwig", strict=True)


def test_split_names_is_case_and_whitespace_tolerant() -> None:
    assert split_names("A B and C D") == ["A B", "C D"]
    assert split_names("A B  AND\tC D") == ["A B", "C D"]
    assert split_names("Anderson, Sandy and Band, Andy") == ["Anderson, Sandy", "Band, Andy"]


def test_split_names_ignores_braced_and() -> None:
    assert split_names("{Barnes and Noble} and Poe, Edgar") == ["{Barnes and Noble}", "Poe, Edgar"]


def test_parse_names_drops_empty_segments() -> None:
    names = parse_names("Poe, Edgar A. and {} and  Herman  Melville")

    assert [name.family for name in names] == ["Poe", "Melville"]
    assert names[1].given == "Herman"


def test_names_compare_by_family_then_given() -> None:
    alpha = Name(family="Poe", given="Edgar")
    beta = Name(family="Poe", given="Edgar", particle="x")
    gamma = Name(family="Poe", given="Zed")
    delta = Name(family="Melville", given="Herman")

    assert alpha == beta
    assert hash(alpha) == hash(beta)
    assert sorted([gamma, alpha, delta]) == [delta, alpha, gamma]
    assert alpha != "Poe"


def test_names_are_immutable() -> None:
    name = Name(family="Poe")

    with pytest.raises(AttributeError):
        name.family = "Melville"  # type: ignore[misc]


def test_sort_and_display_rendering() -> None:
    name = Name(family="Beethoven", given="Ludwig", particle="van", suffix="Jr.")

    assert name.sort_order() == "van Beethoven, Jr., Ludwig"
    assert name.display_order() == "Ludwig van Beethoven, Jr."
    assert name.to_string("sort") == str(name)
    assert name.to_string("display") == name.display_order()
    with pytest.raises(ValueError):
        name.to_string("initials")  # type: ignore[arg-type]


def test_rendering_round_trips_through_the_parser() -> None:
    original = parse_name("Ludwig van Beethoven")

    assert parse_name(original.sort_order()) == original
    assert parse_name(original.sort_order()).particle == "van"
    assert parse_name(original.display_order()).particle == "van"


def test_initials() -> None:
    assert Name(family="Poe", given="Edgar Allan").initials() == "E. A."
    assert Name(family="Sartre", given="Jean-Paul").initials() == "J.-P."
    assert Name(family="Poe").initials() == ""


def test_to_citation_uses_particle_key() -> None:
    name = parse_name("van Beethoven, Ludwig")

    assert name.to_citation() == {
        "family": "Beethoven",
        "given": "Ludwig",
        "dropping-particle": "van",
    }
    assert name.to_citation("non-dropping-particle")["non-dropping-particle"] == "van"


def test_to_citation_omits_missing_parts() -> None:
    assert parse_name("Poe, Edgar A.").to_citation() == {"family": "Poe", "given": "Edgar A."}
    assert Name(family="King", given="Martin", suffix="Jr.").to_citation()["suffix"] == "Jr."


def test_extra_comma_segments_belong_to_the_given_name() -> None:
    name = parse_name("Poe, Jr., Edgar, Allan")

    assert name.family == "Poe"
    assert name.suffix == "Jr."
    assert name.given == "Edgar, Allan"


def test_later_lowercase_words_extend_the_particle() -> None:
    name = parse_name("Jean de La Fontaine")

    assert name.particle == "de"
    assert name.family == "La Fontaine"
    assert name.given == "Jean"


def test_split_names_collapses_ties_and_spacing() -> None:
    assert split_names("Ludwig~van Beethoven  and\nPoe, Edgar") == [
        "Ludwig van Beethoven",
        "Poe, Edgar",
    ]
    assert split_names("") == []


def test_from_person_keeps_the_pybtex_decomposition() -> None:
    name = Name.from_person(Person("van Beethoven, Jr, Ludwig Maria"))

    assert name.family == "Beethoven"
    assert name.particle == "van"
    assert name.suffix == "Jr"
    assert name.given == "Ludwig Maria"
    assert Name.from_person(Person("Aristotle")) == Name(family="Aristotle")
