# Regras de status e completude para demandas e documentos
import logging

__version__ = "1.0.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())
