"""
This submodule contains the provider that evaluates feature flags locally, against definitions
cached from the flags API.
"""

import traceback
from typing import Any, Dict, Optional

from mpflags.config import LocalFlagsConfig
from mpflags.evaluation import SelectedVariant
from mpflags.impl.datasource.definitions_requester import DefinitionsRequesterImpl
from mpflags.impl.datasource.polling import DefinitionsPoller
from mpflags.impl.evaluator import Evaluator
from mpflags.impl.exposure import EVALUATION_MODE_LOCAL, ExposureTracker
from mpflags.impl.store import DefinitionStore
from mpflags.impl.util import log
from mpflags.interfaces import DefinitionsRequester, Tracker


class LocalFlagsProvider:
    """Evaluates feature flags in-process.

    Flag definitions are fetched when :func:`start_polling_for_definitions` is called and, unless
    polling is disabled in the configuration, refreshed periodically on a background thread.
    Evaluations never make network requests; they use whatever definitions were most recently
    fetched, and return the caller's fallback if a flag is unknown.

    Provider instances are thread-safe.
    """

    def __init__(self, token: str, config: Optional[LocalFlagsConfig] = None, tracker: Optional[Tracker] = None, requester: Optional[DefinitionsRequester] = None):
        """Constructs a new provider. No requests are made until polling is started.

        :param token: the project token
        :param config: optional custom configuration
        :param tracker: the function that exposure events are sent through; if omitted, exposure
          events are not reported
        :param requester: replaces the component that downloads definitions; for testing
        """
        if not token:
            log.warning("Missing or blank project token.")
        self._config = config or LocalFlagsConfig()
        self._store = DefinitionStore()
        self._requester = requester or DefinitionsRequesterImpl(token, self._config)
        self._poller = DefinitionsPoller(self._config, self._requester, self._store)
        self._evaluator = Evaluator()
        self._exposure_tracker = ExposureTracker(tracker, EVALUATION_MODE_LOCAL)

    def start_polling_for_definitions(self):
        """Fetches flag definitions, blocking until the request completes, and then starts refreshing
        them in the background if polling is enabled.

        A failed fetch is logged rather than raised; evaluations then keep returning fallbacks (or the
        previously fetched results) until a later fetch succeeds.
        """
        self._poller.start()

    def stop_polling_for_definitions(self):
        """Stops refreshing flag definitions. Definitions that were already fetched remain in use.
        """
        self._poller.stop()

    def are_flags_ready(self) -> bool:
        """Returns true if flag definitions have been fetched successfully at least once.
        """
        return self._poller.initialized()

    def close(self):
        """Stops polling and releases network connections.
        """
        log.info("Closing local flags provider..")
        if self._poller.polling:
            self._poller.stop()
        self._requester.close()

    # These magic methods allow a provider to be automatically cleaned up by the "with" scope operator
    def __enter__(self):
        return self

    def __exit__(self, type, value, traceback):
        self.close()

    def is_enabled(self, flag_key: str, context: Dict[str, Any]) -> bool:
        """Checks whether a feature gate is on for a context.

        This is meant for flags whose variant values are booleans. It returns true only if the selected
        variant value is exactly ``True``; other truthy values, such as ``"true"`` or ``1``, count as off.

        :param flag_key: the flag key
        :param context: the evaluation context; should contain ``distinct_id``
        """
        return self.get_variant_value(flag_key, False, context) is True

    def get_variant_value(self, flag_key: str, fallback_value: Any, context: Dict[str, Any], report_exposure: bool = True) -> Any:
        """Returns the value of the variant selected for a context.

        :param flag_key: the flag key
        :param fallback_value: returned if the flag is unknown or the context is not in any rollout
        :param context: the evaluation context
        :param report_exposure: whether to send an exposure event when a variant is selected
        """
        return self.get_variant(flag_key, SelectedVariant(variant_value=fallback_value), context, report_exposure).variant_value

    def get_variant(self, flag_key: str, fallback_variant: Optional[SelectedVariant], context: Dict[str, Any], report_exposure: bool = True) -> Optional[SelectedVariant]:
        """Returns the variant selected for a context, including its experiment details.

        :param flag_key: the flag key
        :param fallback_variant: returned if the flag is unknown or the context is not in any rollout
        :param context: the evaluation context
        :param report_exposure: whether to send an exposure event when a variant is selected
        """
        selected = self._evaluate(self._store.get(flag_key), flag_key, context)
        if selected is None:
            return fallback_variant
        if report_exposure:
            self._exposure_tracker.track(flag_key, selected, context)
        return selected

    def get_all_variants(self, context: Dict[str, Any]) -> Dict[str, SelectedVariant]:
        """Returns the variants selected for a context for every known flag. Flags for which the
        context would get a fallback are left out.

        No exposure events are sent; use :func:`track_exposure_event` for the variants that are
        actually used.

        :param context: the evaluation context
        """
        variants = {}
        for flag_key, flag in self._store.all().items():
            selected = self._evaluate(flag, flag_key, context)
            if selected is not None:
                variants[flag_key] = selected
        return variants

    def track_exposure_event(self, flag_key: str, selected_variant: SelectedVariant, context: Dict[str, Any]):
        """Sends an exposure event for a variant obtained from :func:`get_all_variants`.

        :param flag_key: the flag key
        :param selected_variant: the variant the context was exposed to
        :param context: the evaluation context; must contain ``distinct_id``
        """
        self._exposure_tracker.track(flag_key, selected_variant, context)

    def _evaluate(self, flag, flag_key: str, context: Dict[str, Any]) -> Optional[SelectedVariant]:
        if flag is None:
            log.warning("Cannot find flag definition for key: '%s'" % flag_key)
            return None
        if not isinstance(context, dict):
            log.warning("Context for flag '%s' should be a dict but was %s; returning fallback" % (flag_key, context.__class__))
            return None
        try:
            return self._evaluator.evaluate(flag, context)
        except Exception as e:
            log.error("Unexpected error while evaluating feature flag \"%s\": %s" % (flag_key, repr(e)))
            log.debug(traceback.format_exc())
            return None
