"""
Settings and Supabase client.

Settings come from the environment (.env) first, then from Streamlit secrets
(.streamlit/secrets.toml) when deployed. The client is cached via Streamlit
for the app and uncached for scripts and tests.
"""
import logging
import os
from typing import Optional

import streamlit as st
from dotenv import load_dotenv
from supabase import create_client, Client

load_dotenv()

logger = logging.getLogger(__name__)


def get_setting(name: str, default: Optional[str] = None) -> Optional[str]:
    value = os.environ.get(name)
    if value:
        return value
    try:
        return st.secrets[name]
    except (FileNotFoundError, KeyError):
        return default


def _env_client() -> Client:
    url = get_setting("SUPABASE_URL")
    key = get_setting("SUPABASE_KEY")
    if not url or not key:
        raise ValueError("SUPABASE_URL and SUPABASE_KEY must be set")
    logger.info(f"Connecting to Supabase at {url}")
    return create_client(url, key)


@st.cache_resource
def get_supabase() -> Client:
    return _env_client()


def get_supabase_uncached() -> Client:
    """For CLI/scripts (no Streamlit context)."""
    return _env_client()
