__license__ = "GNU Affero General Public License http://www.gnu.org/licenses/agpl.html"
__copyright__ = "Copyright (C) 2026 The QuickSlice Project - Released under terms of the AGPLv3 License"

import collections
import logging
import queue
import threading

# singleton
_instance = None


def all_events():
    return [
        getattr(Events, name)
        for name in Events.__dict__
        if not name.startswith("_") and isinstance(getattr(Events, name), str)
    ]


class Events:
    # application
    STARTUP = "Startup"
    SHUTDOWN = "Shutdown"

    # presets
    PRESET_ADDED = "PresetAdded"
    PRESET_MODIFIED = "PresetModified"
    PRESET_DELETED = "PresetDeleted"
    PRESET_SELECTED = "PresetSelected"
    PRESETS_RELOADED = "PresetsReloaded"

    # config files and bundles
    CONFIG_LOADED = "ConfigLoaded"
    CONFIG_EXPORTED = "ConfigExported"
    BUNDLE_IMPORTED = "BundleImported"
    BUNDLE_EXPORTED = "BundleExported"

    # quick slice
    SLICING_STARTED = "SlicingStarted"
    SLICING_DONE = "SlicingDone"
    SLICING_FAILED = "SlicingFailed"
    SLICING_CANCELLED = "SlicingCancelled"

    # settings
    SETTINGS_UPDATED = "SettingsUpdated"


def eventManager():
    global _instance
    if _instance is None:
        _instance = EventManager()
    return _instance


class EventManager:
    """
    Handles receiving events and dispatching them to subscribers.

    Events are queued by :meth:`fire` and delivered on a worker thread, so listeners never block the code that
    fired the event.
    """

    def __init__(self):
        self._registeredListeners = collections.defaultdict(list)
        self._logger = logging.getLogger(__name__)
        self._logger_fire = logging.getLogger(f"{__name__}.fire")

        self._shutdown_signaled = False
        self._queue = queue.Queue()

        self._worker = threading.Thread(target=self._work)
        self._worker.daemon = True
        self._worker.start()

    def _work(self):
        try:
            while not self._shutdown_signaled:
                event, payload = self._queue.get(True)
                if event == Events.SHUTDOWN:
                    self._logger.info(
                        "Processing shutdown event, this will be our last event"
                    )
                    self._shutdown_signaled = True

                self._logger_fire.debug(f"Firing event: {event} (Payload: {payload!r})")

                for listener in list(self._registeredListeners[event]):
                    self._logger.debug(f"Sending action to {listener!r}")
                    try:
                        listener(event, payload)
                    except Exception:
                        self._logger.exception(
                            "Got an exception while sending event {} (Payload: {!r}) to {}".format(
                                event, payload, listener
                            )
                        )
            self._logger.info("Event loop shut down")
        except Exception:
            self._logger.exception("Ooops, the event bus worker loop crashed")

    def fire(self, event, payload=None):
        """
        Fire an event to anyone subscribed to it.

        Callbacks must implement the signature ``callback(event, payload)``, with ``event`` being the event's name
        and ``payload`` being a payload object specific to the event.
        """
        self._queue.put((event, payload))

    def subscribe(self, event, callback):
        """
        Subscribe a listener to an event -- pass in the event name (as a string) and the callback object
        """

        if callback in self._registeredListeners[event]:
            return

        self._registeredListeners[event].append(callback)
        self._logger.debug(f"Subscribed listener {callback!r} for event {event}")

    def unsubscribe(self, event, callback):
        """
        Unsubscribe a listener from an event -- pass in the event name (as string) and the callback object
        """

        try:
            self._registeredListeners[event].remove(callback)
        except ValueError:
            pass

    def shutdown(self, timeout=None):
        """Fires :attr:`Events.SHUTDOWN` and waits for the worker to process everything queued before it."""
        self.fire(Events.SHUTDOWN)
        return self.join(timeout)

    def join(self, timeout=None):
        self._worker.join(timeout)
        return self._worker.is_alive()
