from .base import Connector
from .text_connector import TextSeriesConnector

__all__ = ["Connector", "TextSeriesConnector"]
