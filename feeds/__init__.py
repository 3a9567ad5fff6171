"""Donation source collaborators."""

from feeds.donations import DonationFeedClient, fetch_donations

__all__ = ["DonationFeedClient", "fetch_donations"]
