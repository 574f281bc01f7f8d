from __future__ import annotations


class ProvisioningError(LookupError):
    """Base class for lookup failures raised by the provisioning components."""


class UnsupportedVariant(ProvisioningError):
    """No constructor is mapped to the requested discriminator, role, family or step."""


class TemplateNotFound(ProvisioningError):
    pass


class RecipeNotFound(ProvisioningError):
    pass


class ResolutionError(ProvisioningError):
    pass


class FamilyMismatch(TypeError):
    """A product carries a family tag different from its factory's."""
