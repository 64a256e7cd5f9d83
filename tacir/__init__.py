"""Three-address-code intermediate representation with SSA construction, optimisation passes and a validator."""

__version__ = "0.1.0"