from organoai.core.models import DiseaseInfo


def test_lookup_exact_match(diseases):
    diseases.add(DiseaseInfo("Mildiu", "Hongo en el envés.", "Fungicida cúprico."))

    info = diseases.lookup("Mildiu")

    assert info == DiseaseInfo("Mildiu", "Hongo en el envés.", "Fungicida cúprico.")


def test_lookup_is_case_sensitive(diseases):
    diseases.add(DiseaseInfo("Mildiu", "d", "t"))
    assert diseases.lookup("mildiu") is None
    assert diseases.lookup("Roya") is None


def test_missing_fields_use_placeholder(store, diseases):
    store.add("enfermedad", {"nombre": "Roya"})
    info = diseases.lookup("Roya")
    assert info.description == "No disponible"
    assert info.treatment == "No disponible"


def test_import_file_skips_existing(tmp_path, diseases):
    diseases.add(DiseaseInfo("Mildiu", "original", "original"))
    path = tmp_path / "diseases.yaml"
    path.write_text(
        "- nombre: Mildiu\n"
        "  descripcion: nueva\n"
        "- nombre: Roya\n"
        "  descripcion: Pústulas anaranjadas.\n"
        "  tratamiento: Retirar hojas afectadas.\n",
        encoding="utf-8",
    )

    assert diseases.import_file(path) == 1
    assert diseases.lookup("Mildiu").description == "original"
    assert diseases.lookup("Roya").treatment == "Retirar hojas afectadas."
