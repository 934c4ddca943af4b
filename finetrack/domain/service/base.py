"""Base service class for domain services."""


class Service:
    """Base class for all domain services.

    Domain services hold business rules that span entities, such as keeping
    a fine's comment count in step with its comments.
    """

    pass
