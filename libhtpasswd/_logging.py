import logging

logger = logging.getLogger("libhtpasswd")
