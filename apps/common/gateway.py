"""
Document gateway over the Django ORM.

Services never talk to managers directly for multi-entity writes. They go
through a DocumentGateway bound to one database alias, which offers:

    get(model, pk)                                -> instance or None
    conditional_write(model, pk, expected, changes) -> True if applied
    create(model, **fields)                       -> instance
    query(model, **filters)                       -> QuerySet
    subscribe(model, predicate, callback)         -> Subscription

A conditional write is a single ``UPDATE ... WHERE pk = ? AND <expected>``.
Zero rows updated means someone else changed the document since it was read;
the caller decides whether that is a conflict or a failed precondition.

Changes made through the gateway are published to subscribers after the
surrounding transaction commits, so a subscriber never sees rolled back data.

The gateway is built once at startup (see ``apps.common.apps``) and passed
to the services that need it.
"""

import logging
import uuid
from contextlib import contextmanager
from typing import Any, Callable, Optional

from django.db import DEFAULT_DB_ALIAS, OperationalError, transaction
from django.db.models import F, Model, QuerySet
from django.dispatch import Signal
from django.utils import timezone

from .exceptions import ServiceUnavailableError

logger = logging.getLogger(__name__)

# Sent with ``instance`` and ``using`` once a gateway write has committed.
document_changed = Signal()

Predicate = Callable[[Model], bool]


def field_equals(**expected: Any) -> Predicate:
    """Build a predicate matching documents whose fields equal ``expected``."""

    def predicate(instance: Model) -> bool:
        return all(getattr(instance, name) == value for name, value in expected.items())

    return predicate


class Subscription:
    """
    Handle for a live query.

    Holding the handle keeps the callback connected. ``release()`` disconnects
    it and is safe to call more than once. Use it as a context manager to
    release on every exit path::

        with gateway.subscribe(Listing, field_equals(status='available'), on_change):
            ...
    """

    def __init__(self, model, predicate: Optional[Predicate], callback, using: str):
        self.model = model
        self.predicate = predicate
        self.callback = callback
        self.using = using
        self.dispatch_uid = f'subscription-{uuid.uuid4()}'
        self.active = True
        document_changed.connect(
            self._receive,
            sender=model,
            weak=False,
            dispatch_uid=self.dispatch_uid,
        )

    def _receive(self, sender, instance, using, **kwargs):
        if not self.active or using != self.using:
            return
        if self.predicate is None or self.predicate(instance):
            self.callback(instance)

    def release(self) -> None:
        """Disconnect the callback. Idempotent."""
        if not self.active:
            return
        document_changed.disconnect(sender=self.model, dispatch_uid=self.dispatch_uid)
        self.active = False

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.release()
        return False

    def __repr__(self):
        state = 'active' if self.active else 'released'
        return f"<Subscription {self.model.__name__} {state}>"


class DocumentGateway:
    """Read, conditional-write and subscribe access to one database alias."""

    def __init__(self, using: str = DEFAULT_DB_ALIAS):
        self.using = using

    def __repr__(self):
        return f"<DocumentGateway using={self.using!r}>"

    # -- transactions and outages ------------------------------------------

    def atomic(self):
        """Transaction on this gateway's database."""
        return transaction.atomic(using=self.using)

    @contextmanager
    def guard(self):
        """
        Translate backing store failures into ServiceUnavailableError.

        Timeouts, lock waits past the configured limit and lost connections
        all surface from Django as OperationalError.
        """
        try:
            yield
        except OperationalError as e:
            logger.warning("Backing store unavailable (%s): %s", self.using, e)
            raise ServiceUnavailableError(
                "The service is temporarily unavailable. Please try again."
            ) from e

    # -- reads --------------------------------------------------------------

    def get(self, model, pk, related=()) -> Optional[Model]:
        """
        Return the document with primary key ``pk`` or None.

        ``related`` names foreign keys to load in the same query.
        """
        queryset = model._default_manager.using(self.using)
        if related:
            queryset = queryset.select_related(*related)
        try:
            return queryset.get(pk=pk)
        except model.DoesNotExist:
            return None

    def query(self, model, **filters) -> QuerySet:
        """Return a lazy QuerySet of documents matching ``filters``."""
        return model._default_manager.using(self.using).filter(**filters)

    # -- writes -------------------------------------------------------------

    def create(self, model, **fields) -> Model:
        """Insert a new document and publish it after commit."""
        instance = model._default_manager.db_manager(self.using).create(**fields)
        self._publish_on_commit(model, instance.pk)
        return instance

    def conditional_write(self, model, pk, expected: dict, changes: dict) -> bool:
        """
        Apply ``changes`` only if the stored document still matches ``expected``.

        ``expected`` takes ORM lookups (``status='available'``,
        ``balance__gte=100``). Models with a ``version`` field get it bumped,
        models with an ``updated_at`` field get it refreshed.

        Returns True if exactly one document was updated.
        """
        field_names = {field.name for field in model._meta.get_fields()}
        values = dict(changes)
        if 'version' in field_names:
            values['version'] = F('version') + 1
        if 'updated_at' in field_names:
            values['updated_at'] = timezone.now()

        updated = (
            model._default_manager
            .using(self.using)
            .filter(pk=pk, **expected)
            .update(**values)
        )
        if updated:
            self._publish_on_commit(model, pk)
        return updated == 1

    # -- live queries -------------------------------------------------------

    def subscribe(self, model, predicate: Optional[Predicate], callback) -> Subscription:
        """
        Deliver committed changes of ``model`` matching ``predicate``.

        ``callback`` receives the freshly read instance. Returns the handle
        the caller must release.
        """
        return Subscription(model, predicate, callback, using=self.using)

    def _publish_on_commit(self, model, pk) -> None:
        transaction.on_commit(lambda: self._publish(model, pk), using=self.using)

    def _publish(self, model, pk) -> None:
        # Runs after commit: the write stands whatever happens here.
        try:
            instance = self.get(model, pk)
        except OperationalError as e:
            logger.warning(
                "Could not read %s %s to publish it: %s", model.__name__, pk, e
            )
            return
        if instance is None:
            return
        responses = document_changed.send_robust(sender=model, instance=instance, using=self.using)
        for receiver, response in responses:
            if isinstance(response, Exception):
                logger.error(
                    "Subscriber %r failed for %s %s",
                    receiver, model.__name__, pk,
                    exc_info=(type(response), response, response.__traceback__),
                )
