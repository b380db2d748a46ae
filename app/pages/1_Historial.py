"""
History Page

Saved scans of the current user, newest first.
"""
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent.parent))

import streamlit as st

from organoai.config import load_settings
from organoai.errors import AuthError, OrganoAIError
from organoai.services import create_document_store
from organoai.storage.scan_store import ScanRecordStore

st.set_page_config(page_title="Historial", page_icon="📜", layout="wide")

st.title("📜 Historial de escaneos")


@st.cache_resource
def get_scan_store():
    """Initialize the scan history store."""
    return ScanRecordStore(create_document_store(load_settings()))


user_id = st.session_state.get("user_id") or load_settings().user_id

try:
    records = get_scan_store().list_all(user_id)
except AuthError:
    st.warning("Inicie sesión en la página Perfil para ver su historial.")
    st.stop()
except OrganoAIError as e:
    st.error(f"Error al obtener los escaneos: {e.message}")
    st.stop()

if not records:
    st.info("No hay escaneos guardados")
    st.stop()

st.metric("Escaneos", len(records))

located = [r for r in records if r.latitude is not None and r.longitude is not None]
if located:
    st.map(
        {"lat": [r.latitude for r in located], "lon": [r.longitude for r in located]},
        latitude="lat",
        longitude="lon",
    )

for record in records:
    with st.container(border=True):
        col1, col2 = st.columns([1, 2])
        with col1:
            st.image(record.image_url, width="stretch")
        with col2:
            st.subheader(record.disease_type)
            st.caption(record.scanned_at.astimezone().strftime("%Y-%m-%d %H:%M:%S"))
            st.write(f"**Descripción:** {record.description}")
            st.write(f"**Tratamiento:** {record.treatment}")
            if record.latitude is not None:
                st.write(f"**Ubicación:** {record.latitude:.6f}, {record.longitude:.6f}")
