"""
Settings Page

Shows the resolved configuration and the connection status.
"""
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent.parent))

import streamlit as st

from organoai.config import load_settings
from organoai.errors import OrganoAIError
from organoai.services import create_classifier, create_document_store

st.set_page_config(page_title="Configuración", page_icon="⚙️", layout="wide")

st.title("⚙️ Configuración")

try:
    settings = load_settings()
except OrganoAIError as e:
    st.error(f"Configuration error: {e.message}")
    st.stop()

col1, col2 = st.columns(2)

with col1:
    st.subheader("Clasificación")
    if settings.classifier_url:
        st.write(settings.classifier_url)
        if create_classifier(settings).health_check():
            st.success("API disponible")
        else:
            st.error("API no disponible")
    else:
        st.error("ORGANOAI_CLASSIFIER_URL no configurada")

    st.subheader("ImgBB")
    if settings.imgbb_api_key:
        st.success(f"API key: {settings.imgbb_api_key[:4]}…")
    else:
        st.error("IMGBB_API_KEY no configurada")

with col2:
    st.subheader("Almacenamiento")
    st.write(f"Backend: {settings.storage}")
    try:
        create_document_store(settings)
        target = settings.database if settings.storage == "sqlite" else settings.supabase_url
        st.success(f"Connected: {target}")
    except OrganoAIError as e:
        st.error(f"Error connecting to storage: {e.message}")

    st.subheader("Ubicación")
    if settings.device_position:
        st.write(f"Fija: {settings.latitude}, {settings.longitude}")
    else:
        st.write("Desde los datos EXIF de cada foto")

st.header("Environment Variables")
st.markdown("""
- `ORGANOAI_CLASSIFIER_URL`: URL of the classification API
- `ORGANOAI_CLASSIFIER_FIELD`: Multipart field for the image (default `file`)
- `IMGBB_API_KEY`: ImgBB API key
- `ORGANOAI_STORAGE`: `sqlite` or `supabase`
- `ORGANOAI_DATABASE`: SQLite database path
- `SUPABASE_URL` / `SUPABASE_KEY`: Supabase project
- `ORGANOAI_USER_ID`: Default user
- `ORGANOAI_TIMEOUT`: HTTP timeout in seconds
- `ORGANOAI_LATITUDE` / `ORGANOAI_LONGITUDE`: Fixed device position
""")
