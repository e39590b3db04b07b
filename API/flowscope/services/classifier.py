from flowscope.domain.container import ServiceCategory

# Checked in order, first match wins.
PREFIX_RULES: tuple[tuple[str, ServiceCategory], ...] = (
    ("aiml-", ServiceCategory.AIML),
    ("application-", ServiceCategory.APPLICATION),
    ("infrastructure-", ServiceCategory.INFRASTRUCTURE),
    ("frontend-", ServiceCategory.FRONTEND),
    ("monitoring-", ServiceCategory.MONITORING),
    ("game-", ServiceCategory.GAME),
    ("val-", ServiceCategory.VAL),
)

VALIDATOR_PREFIX = "valina-validator"
CHAIN_MARKER = "chain"


def classify(name: str) -> ServiceCategory:
    """
    Map a container name to its service category.

    Only the name is looked at, never the image or labels.
    """
    lower = name.lower()
    for prefix, category in PREFIX_RULES:
        if lower.startswith(prefix):
            return category
    if lower.startswith(VALIDATOR_PREFIX) or CHAIN_MARKER in lower:
        return ServiceCategory.BLOCKCHAIN
    return ServiceCategory.OTHER
