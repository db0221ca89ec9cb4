"""EventKit wrapper for Reminders access inside the gateway process.

One ReminderStore is opened per gateway invocation. Opening it verifies
(or requests) full Reminders access; every method then performs its
fetch or its single committed save against the EKEventStore.
"""

import logging
import threading
from typing import Any

from EventKit import (
    EKAlarm,
    EKAuthorizationStatusDenied,
    EKAuthorizationStatusFullAccess,
    EKAuthorizationStatusRestricted,
    EKCalendar,
    EKEntityTypeReminder,
    EKEventStore,
    EKReminder,
    EKSourceTypeCalDAV,
    EKSourceTypeLocal,
)
from Foundation import NSDate

from ..constants import FETCH_TIMEOUT, PERMISSION_TIMEOUT
from ..exceptions import (
    AccessDeniedError,
    EventKitError,
    NotFoundError,
    NoWritableSourceError,
    OperationTimeoutError,
    PermissionTimeoutError,
)
from ..models import CreateReminderInput, ReminderFields, UpdateReminderInput
from .converters import (
    date_to_components,
    datetime_to_components,
    datetime_to_nsdate,
    ek_calendar_to_record,
    ek_reminder_to_record,
    to_eventkit_priority,
)

logger = logging.getLogger(__name__)


class ReminderStore:
    """Wrapper for EKEventStore returning gateway wire records."""

    def __init__(
        self,
        permission_timeout: float = PERMISSION_TIMEOUT,
        fetch_timeout: float = FETCH_TIMEOUT,
    ) -> None:
        """Initialize the store and make sure Reminders access is granted.

        Raises:
            PermissionTimeoutError: If permission request times out
            AccessDeniedError: If user denies Reminders access
        """
        self._store: EKEventStore = EKEventStore.alloc().init()
        self._permission_timeout = permission_timeout
        self._fetch_timeout = fetch_timeout
        self._ensure_access()

    def _ensure_access(self) -> None:
        """Check authorization, requesting it synchronously if undetermined.

        Blocks until user responds to permission dialog or timeout.
        """
        status = EKEventStore.authorizationStatusForEntityType_(EKEntityTypeReminder)
        if status == EKAuthorizationStatusFullAccess:
            return
        if status in (EKAuthorizationStatusDenied, EKAuthorizationStatusRestricted):
            raise AccessDeniedError()

        logger.info("Requesting Reminders access")
        event = threading.Event()
        result: dict[str, Any] = {"granted": False, "error": None}

        def handler(granted: bool, error: Any) -> None:
            result["granted"] = granted
            result["error"] = error
            event.set()

        self._store.requestFullAccessToRemindersWithCompletion_(handler)

        if not event.wait(timeout=self._permission_timeout):
            raise PermissionTimeoutError(self._permission_timeout)

        if result["error"]:
            raise AccessDeniedError(
                f"Reminders access request failed: {result['error'].localizedDescription()}"
            )

        if not result["granted"]:
            raise AccessDeniedError("Reminders permission was not granted")

    # List (Calendar) Operations

    def list_lists(self) -> list[dict[str, Any]]:
        """Get all reminder lists as {id, name} records."""
        return [ek_calendar_to_record(cal) for cal in self._calendars()]

    def create_list(self, name: str) -> str:
        """Create a new reminder list.

        Returns:
            Identifier of the created list

        Raises:
            NoWritableSourceError: If no writable source is available
            EventKitError: If save fails
        """
        calendar = EKCalendar.calendarForEntityType_eventStore_(
            EKEntityTypeReminder, self._store
        )
        calendar.setTitle_(name)
        calendar.setSource_(self._get_writable_source())

        ok, error = self._store.saveCalendar_commit_error_(calendar, True, None)
        if not ok:
            raise EventKitError.from_nserror(error, f"Failed to create list '{name}'")

        return str(calendar.calendarIdentifier())

    def delete_list(self, name: str) -> None:
        """Delete a reminder list and, natively, every reminder in it.

        Raises:
            NotFoundError: If list doesn't exist
            EventKitError: If delete fails
        """
        calendar = self._calendar_by_name(name)

        ok, error = self._store.removeCalendar_commit_error_(calendar, True, None)
        if not ok:
            raise EventKitError.from_nserror(error, f"Failed to delete list '{name}'")

    # Reminder Operations

    def get_reminder_records(self, list_name: str | None = None) -> list[dict[str, Any]]:
        """Fetch reminders, optionally limited to one list.

        Args:
            list_name: Exact list name, or None for every list

        Returns:
            List of wire records, in EventKit's order

        Raises:
            NotFoundError: If the list doesn't exist
            OperationTimeoutError: If the fetch doesn't finish in time
        """
        calendars = [self._calendar_by_name(list_name)] if list_name else None
        predicate = self._store.predicateForRemindersInCalendars_(calendars)

        event = threading.Event()
        records: list[dict[str, Any]] = []

        def handler(reminders: Any) -> None:
            if reminders:
                # Convert to records INSIDE the callback thread
                records.extend(ek_reminder_to_record(r) for r in reminders)
            event.set()

        self._store.fetchRemindersMatchingPredicate_completion_(predicate, handler)

        if not event.wait(timeout=self._fetch_timeout):
            raise OperationTimeoutError(
                f"Timed out after {self._fetch_timeout:g}s while fetching reminders"
            )

        return records

    def create_reminder(self, params: CreateReminderInput) -> str:
        """Create a new reminder.

        Returns:
            Identifier of the created reminder

        Raises:
            NotFoundError: If the list doesn't exist
            EventKitError: If save fails
        """
        reminder = EKReminder.reminderWithEventStore_(self._store)
        reminder.setCalendar_(self._calendar_by_name(params.list_name))
        reminder.setTitle_(params.name)
        self._apply_fields(reminder, params)

        self._save(reminder, f"Failed to create reminder '{params.name}'")
        return str(reminder.calendarItemIdentifier())

    def update_reminder(self, reminder_id: str, params: UpdateReminderInput) -> None:
        """Apply the fields set in ``params`` to an existing reminder.

        Raises:
            NotFoundError: If reminder doesn't exist
            EventKitError: If save fails
        """
        reminder = self._get_reminder_by_id(reminder_id)

        if params.new_name is not None:
            reminder.setTitle_(params.new_name)
        self._apply_fields(reminder, params)

        if params.completed is not None:
            reminder.setCompleted_(params.completed)
            reminder.setCompletionDate_(NSDate.date() if params.completed else None)

        self._save(reminder, f"Failed to update reminder '{params.reminder_name}'")

    def delete_reminder(self, reminder_id: str) -> None:
        """Delete a reminder.

        Raises:
            NotFoundError: If reminder doesn't exist
            EventKitError: If delete fails
        """
        reminder = self._get_reminder_by_id(reminder_id)

        ok, error = self._store.removeReminder_commit_error_(reminder, True, None)
        if not ok:
            raise EventKitError.from_nserror(
                error, f"Failed to delete reminder: {reminder_id}"
            )

    # Private Helpers

    def _calendars(self) -> list[Any]:
        return list(self._store.calendarsForEntityType_(EKEntityTypeReminder) or [])

    def _calendar_by_name(self, name: str) -> Any:
        for calendar in self._calendars():
            if calendar.title() == name:
                return calendar
        raise NotFoundError(f"List '{name}' not found")

    def _get_reminder_by_id(self, reminder_id: str) -> EKReminder:
        reminder = self._store.calendarItemWithIdentifier_(reminder_id)
        if reminder and isinstance(reminder, EKReminder):
            return reminder
        raise NotFoundError(f"Reminder not found: {reminder_id}")

    def _apply_fields(self, reminder: EKReminder, params: ReminderFields) -> None:
        """Apply optional fields; an all-day due date overrides a timed one."""
        if params.body is not None:
            reminder.setNotes_(params.body)
        if params.due_date is not None:
            reminder.setDueDateComponents_(datetime_to_components(params.due_date))
        if params.all_day_due_date is not None:
            reminder.setDueDateComponents_(date_to_components(params.all_day_due_date))
        if params.remind_me_date is not None:
            alarm = EKAlarm.alarmWithAbsoluteDate_(
                datetime_to_nsdate(params.remind_me_date)
            )
            reminder.setAlarms_([alarm])
        if params.priority is not None:
            reminder.setPriority_(to_eventkit_priority(params.priority))

    def _save(self, reminder: EKReminder, failure: str) -> None:
        ok, error = self._store.saveReminder_commit_error_(reminder, True, None)
        if not ok:
            raise EventKitError.from_nserror(error, failure)

    def _get_writable_source(self) -> Any:
        """Get a writable source for creating new calendars.

        Priority: default calendar's source > iCloud/CalDAV > Local > any

        Raises:
            NoWritableSourceError: If no writable source is available
        """
        default_cal = self._store.defaultCalendarForNewReminders()
        if default_cal and default_cal.allowsContentModifications():
            return default_cal.source()

        sources = list(self._store.sources() or [])
        for wanted in (EKSourceTypeCalDAV, EKSourceTypeLocal, None):
            for source in sources:
                if wanted is not None and source.sourceType() != wanted:
                    continue
                cals = source.calendarsForEntityType_(EKEntityTypeReminder)
                if cals and any(c.allowsContentModifications() for c in cals):
                    return source

        raise NoWritableSourceError()
