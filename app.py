"""OmniFind — Streamlit entry point.

    uv run streamlit run app.py
"""

import logging

from dotenv import load_dotenv

load_dotenv()

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

from omnifind.app import main  # noqa: E402

main()
