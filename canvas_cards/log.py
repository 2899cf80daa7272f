import logging

logger = logging.getLogger("canvas_cards")
