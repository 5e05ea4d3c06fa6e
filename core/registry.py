"""Card and DataSource registries for Chart Station.

Register card types and data source types by name. The board loads
configuration (YAML or dict) and instantiates the right classes by
looking them up here.

Usage:
    @register_card("chart")
    class ChartCard(BaseCard):
        ...

    @register_source("chartfile")
    class ChartFileSource(DataSource):
        ...
"""

import logging

logger = logging.getLogger(__name__)

CARD_REGISTRY = {}
SOURCE_REGISTRY = {}


def register_card(name):
    """Decorator to register a card class by type name."""
    def decorator(cls):
        CARD_REGISTRY[name] = cls
        logger.debug("Registered card type: %s -> %s", name, cls.__name__)
        return cls
    return decorator


def register_source(name):
    """Decorator to register a data source class by type name."""
    def decorator(cls):
        SOURCE_REGISTRY[name] = cls
        logger.debug("Registered source type: %s -> %s", name, cls.__name__)
        return cls
    return decorator


def create_source(config, bus):
    """Instantiate a registered source from its config dict, or None."""
    src_type = config.get("type", "")
    cls = SOURCE_REGISTRY.get(src_type)
    if not cls:
        logger.warning("Unknown source type: %s", src_type)
        return None
    return cls(config.get("id", src_type), bus, dict(config))
