"""
OrganoAI - Streamlit App

Capture page: queue photos, scan them and save the results worth keeping.
"""
import sys
import tempfile
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import streamlit as st

from organoai.api.hosting_api import decode_image
from organoai.config import load_settings
from organoai.core.capture import FileCamera, PathGallery
from organoai.core.diseases import format_diseases
from organoai.errors import ConfigError
from organoai.services import create_capture_store, create_orchestrator

# Configuration
UPLOAD_DIR = Path(__file__).parent.parent / "data" / "uploads"

st.set_page_config(
    page_title="OrganoAI",
    page_icon="🌿",
    layout="wide"
)


class ToastNotifier:
    """Shows scan notifications as toasts."""

    def show(self, title: str, body: str) -> None:
        st.toast(f"**{title}** {body}")


@st.dialog("Resultado del escaneo")
def show_recommendation(record):
    st.write(f"**Enfermedad detectada:** {record.disease_type}")
    st.write(f"**Descripción:** {record.description}")
    st.write(f"**Tratamiento:** {record.treatment}")
    if st.button("Cerrar"):
        st.rerun()


class StreamlitPresenter:
    def show_message(self, text: str) -> None:
        st.toast(text)

    def show_results(self, results) -> None:
        st.session_state.results = results

    def confirm(self, record) -> None:
        show_recommendation(record)


@st.cache_resource
def get_settings():
    return load_settings()


def save_upload(uploaded_file) -> Path:
    """Write an uploaded file to disk so it can be queued by path."""
    UPLOAD_DIR.mkdir(parents=True, exist_ok=True)
    with tempfile.NamedTemporaryFile(
        delete=False,
        dir=UPLOAD_DIR,
        suffix=Path(uploaded_file.name).suffix or ".jpg",
    ) as tmp_file:
        tmp_file.write(uploaded_file.getvalue())
        return Path(tmp_file.name)


def is_new(uploaded_file) -> bool:
    """Widgets return the same file on every rerun; queue it only once."""
    seen = st.session_state.setdefault("seen_uploads", set())
    if uploaded_file.file_id in seen:
        return False
    seen.add(uploaded_file.file_id)
    return True


try:
    settings = get_settings()
    orchestrator = create_orchestrator(
        settings,
        notifier=ToastNotifier(),
        presenter=StreamlitPresenter(),
    )
except ConfigError as e:
    st.error(f"Configuration error: {e.message}")
    st.info("See the Configuración page for the required settings.")
    st.stop()

if "capture" not in st.session_state:
    st.session_state.capture = create_capture_store(settings)
capture = st.session_state.capture
user_id = st.session_state.get("user_id") or settings.user_id

st.title("🌿 OrganoAI")

# Capture
col1, col2 = st.columns(2)

with col1:
    st.subheader("Cámara")
    photo = st.camera_input("Tomar foto")
    if photo is not None and is_new(photo):
        capture.add_from_camera(FileCamera(save_upload(photo)))

with col2:
    st.subheader("Galería")
    uploaded_files = st.file_uploader(
        "Seleccionar imágenes",
        type=["jpg", "jpeg", "png", "webp"],
        accept_multiple_files=True,
    )
    new_files = [f for f in uploaded_files or [] if is_new(f)]
    if new_files:
        capture.add_from_gallery(PathGallery([save_upload(f) for f in new_files]))

# Pending images
st.header(f"Imágenes pendientes ({len(capture)})")

if len(capture):
    cols = st.columns(4)
    for i, image in enumerate(capture.images):
        with cols[i % 4]:
            caption = Path(image.local_path).name
            if image.coordinates:
                caption += f" ({image.latitude:.4f}, {image.longitude:.4f})"
            st.image(image.local_path, caption=caption, width="stretch")
            if st.button("Eliminar", key=f"remove_{i}"):
                capture.remove(i)
                st.rerun()

if st.button("Escanear", type="primary"):
    with st.spinner("Analizando imágenes..."):
        orchestrator.scan(capture)

# Results
results = st.session_state.get("results", [])
if results:
    st.header("Resultados del Escaneo")
    if not user_id:
        st.warning("Sin usuario: configure ORGANOAI_USER_ID o la página Perfil para guardar escaneos.")

    for i, result in enumerate(results):
        with st.container(border=True):
            image_bytes = decode_image(result.response) if result.ok else None
            st.image(image_bytes or result.image.local_path, width=400)

            if not result.ok:
                st.error(f"Error: {result.error}")
                continue

            st.text(format_diseases(result.response.enfermedades))
            if result.is_savable and st.button("Guardar", key=f"save_{i}"):
                orchestrator.save(result, user_id)
