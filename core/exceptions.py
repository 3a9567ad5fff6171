"""Domain exceptions raised by FoodBank Pulse I/O collaborators."""


class FoodBankError(Exception):
    """Base class for FoodBank Pulse errors."""


class DonationFeedError(FoodBankError):
    """The donation source could not be reached or returned invalid data."""


class ScenarioNotFoundError(FoodBankError):
    """No saved scenario exists with the requested id."""
