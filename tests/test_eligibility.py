import pytest

from favocoin.eligibility import EligibilityResolver, is_eligible


@pytest.mark.parametrize(
    "name",
    ["3º Ano A", "1º ANO B", "5º ano", "Turma 2º Ano - Tarde", "4º"],
)
def test_grade_classes_are_eligible(name: str) -> None:
    assert is_eligible(name)


@pytest.mark.parametrize(
    "name",
    ["Creche III", "PRÉ I MANHÃ", "6º Ano A", "Maternal", "", "3 Ano"],
)
def test_other_classes_are_not_eligible(name: str) -> None:
    assert not is_eligible(name)


def test_custom_tokens() -> None:
    resolver = EligibilityResolver(["6º", " 7º "])

    assert resolver.tokens == ("6º", "7º")
    assert resolver.is_eligible("6º Ano A")
    assert not resolver.is_eligible("3º Ano A")
    assert resolver.filter_names(["7º B", "1º A"]) == ("7º B",)


def test_empty_token_list_is_rejected() -> None:
    with pytest.raises(ValueError):
        EligibilityResolver([" ", ""])
