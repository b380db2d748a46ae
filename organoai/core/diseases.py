"""Disease-type extraction from the free-text entries returned by the classifier."""

from typing import Iterable, Optional

from .models import DEFAULT_TEXT

UNKNOWN_DISEASE = "desconocida"
NO_OREGANO = "No se detecta oregano"
NO_OREGANO_DESCRIPTION = "No se detectó orégano en la imagen."
NO_OREGANO_TREATMENT = "No aplica."
NO_CONNECTION_MESSAGE = "Sin conexion al servidor API (revise su conexion a internet)."


def extract_disease_type(entries: Optional[Iterable[str]]) -> str:
    """Pick the disease type out of the classifier's entries.

    Entries look like "label: disease". The first entry whose text after the
    first colon is non-empty and not "desconocida" wins. An entry without a
    colon is taken whole and ends the search. Falls back to "desconocida".

        >>> extract_disease_type(["Planta: Mildiu"])
        'Mildiu'
        >>> extract_disease_type(["x: desconocida"])
        'desconocida'
    """
    for entry in entries or []:
        text = str(entry)
        if ":" in text:
            candidate = text.split(":", 1)[1].strip()
            if candidate and candidate.lower() != UNKNOWN_DISEASE:
                return candidate
        else:
            return text.strip() or UNKNOWN_DISEASE
    return UNKNOWN_DISEASE


def is_no_oregano(disease_type: str) -> bool:
    return disease_type.lower() == NO_OREGANO.lower()


def is_unknown(disease_type: str) -> bool:
    return disease_type.lower() == UNKNOWN_DISEASE


def needs_lookup(disease_type: str) -> bool:
    """Only real disease names have reference text worth fetching."""
    return not (is_no_oregano(disease_type) or is_unknown(disease_type))


def default_texts(disease_type: str) -> tuple[str, str]:
    """Description and treatment to use before (or instead of) a lookup."""
    if is_no_oregano(disease_type):
        return NO_OREGANO_DESCRIPTION, NO_OREGANO_TREATMENT
    return DEFAULT_TEXT, DEFAULT_TEXT


def format_diseases(entries: Optional[list[str]]) -> str:
    """Render the detected diseases as a short multi-line text."""
    if not entries:
        return NO_CONNECTION_MESSAGE
    return "Enfermedades:\n" + "\n".join(f"  {e}" for e in entries)
