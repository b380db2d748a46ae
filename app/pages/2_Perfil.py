"""
Profile Page

Chooses the user identity for this session.
"""
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent.parent))

import streamlit as st

from organoai.config import load_settings

st.set_page_config(page_title="Perfil", page_icon="👤", layout="wide")

st.title("👤 Perfil")

settings = load_settings()
current = st.session_state.get("user_id") or settings.user_id or ""

user_id = st.text_input("ID de usuario", value=current)
if st.button("Guardar"):
    st.session_state.user_id = user_id.strip() or None
    st.success("Usuario actualizado" if user_id.strip() else "Sesión cerrada")

if st.session_state.get("user_id") or settings.user_id:
    st.info(f"Sesión activa: {st.session_state.get('user_id') or settings.user_id}")
else:
    st.warning("Sin usuario: el historial y el guardado no están disponibles.")
