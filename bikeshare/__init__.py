"""
The main package for the bike share ledger client.
"""

import logging

from bikeshare.config import client_mode

logger = logging.getLogger(__name__)
handler = logging.StreamHandler()
formatter = logging.Formatter('%(asctime)s %(name)-12s %(levelname)-8s %(message)s')
handler.setFormatter(formatter)
logger.addHandler(handler)
logger.setLevel(logging.DEBUG if client_mode == "development" else logging.INFO)
