import pytest

from organoai.core.diseases import (
    NO_CONNECTION_MESSAGE,
    NO_OREGANO_DESCRIPTION,
    NO_OREGANO_TREATMENT,
    default_texts,
    extract_disease_type,
    format_diseases,
    needs_lookup,
)


@pytest.mark.parametrize("entries, expected", [
    (["Planta: Mildiu"], "Mildiu"),
    (["No se detecta oregano"], "No se detecta oregano"),
    (["x: desconocida"], "desconocida"),
    ([], "desconocida"),
    (None, "desconocida"),
    (["a: Desconocida", "b:  Roya  "], "Roya"),
    (["a:   ", "b: Oidio"], "Oidio"),
    (["  Sana  ", "b: Roya"], "Sana"),
    (["Planta: Mildiu: tardío"], "Mildiu: tardío"),
    (["   "], "desconocida"),
])
def test_extract_disease_type(entries, expected):
    assert extract_disease_type(entries) == expected


def test_entry_without_colon_stops_the_search():
    assert extract_disease_type(["x: desconocida", "Sin hojas", "y: Roya"]) == "Sin hojas"


def test_no_oregano_texts_are_not_applicable():
    assert default_texts("NO SE DETECTA OREGANO") == (NO_OREGANO_DESCRIPTION, NO_OREGANO_TREATMENT)
    assert default_texts("Mildiu") == ("No disponible", "No disponible")


def test_needs_lookup():
    assert needs_lookup("Mildiu")
    assert not needs_lookup("Desconocida")
    assert not needs_lookup("no se detecta oregano")


def test_format_diseases():
    assert format_diseases([]) == NO_CONNECTION_MESSAGE
    assert format_diseases(None) == NO_CONNECTION_MESSAGE
    assert format_diseases(["Planta: Mildiu", "Hoja: Roya"]) == (
        "Enfermedades:\n  Planta: Mildiu\n  Hoja: Roya"
    )
