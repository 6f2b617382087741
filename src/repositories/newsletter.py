"""Newsletter subscriber repository — email is unique, see NewsletterSubscriber."""

from src.models.newsletter import NewsletterSubscriber
from src.repositories.base import RecordRepository


class SubscriberRepository(RecordRepository[NewsletterSubscriber]):
    model = NewsletterSubscriber
