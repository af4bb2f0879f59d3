"""
This submodule contains the provider that asks the flags API to evaluate feature flags.
"""

from typing import Any, Dict, Optional

from mpflags.config import RemoteFlagsConfig
from mpflags.evaluation import SelectedVariant
from mpflags.impl.datasource.remote_requester import RemoteFlagsRequesterImpl
from mpflags.impl.exposure import EVALUATION_MODE_REMOTE, ExposureTracker
from mpflags.impl.util import current_time_millis, log
from mpflags.interfaces import RemoteFlagsRequester, Tracker


class RemoteFlagsProvider:
    """Evaluates feature flags by calling the flags API once per evaluation.

    None of the methods raise on network or server errors; they log the error and return the
    fallback instead.
    """

    def __init__(self, token: str, config: Optional[RemoteFlagsConfig] = None, tracker: Optional[Tracker] = None, requester: Optional[RemoteFlagsRequester] = None):
        """
        :param token: the project token
        :param config: optional custom configuration
        :param tracker: the function that exposure events are sent through; if omitted, exposure
          events are not reported
        :param requester: replaces the component that calls the flags API; for testing
        """
        if not token:
            log.warning("Missing or blank project token.")
        self._config = config or RemoteFlagsConfig()
        self._requester = requester or RemoteFlagsRequesterImpl(token, self._config)
        self._exposure_tracker = ExposureTracker(tracker, EVALUATION_MODE_REMOTE)

    def close(self):
        self._requester.close()

    def __enter__(self):
        return self

    def __exit__(self, type, value, traceback):
        self.close()

    def is_enabled(self, flag_key: str, context: Dict[str, Any]) -> bool:
        """Checks whether a feature gate is on for a context. Only the boolean ``True`` counts as on.
        """
        return self.get_variant_value(flag_key, False, context) is True

    def get_variant_value(self, flag_key: str, fallback_value: Any, context: Dict[str, Any], report_exposure: bool = True) -> Any:
        return self.get_variant(flag_key, SelectedVariant(variant_value=fallback_value), context, report_exposure).variant_value

    def get_variant(self, flag_key: str, fallback_variant: Optional[SelectedVariant], context: Dict[str, Any], report_exposure: bool = True) -> Optional[SelectedVariant]:
        """Returns the variant the flags API selects for a context.

        The fallback is returned, and no exposure event is sent, if the request fails or the API does
        not return the flag. Exposure events for remote evaluations include the request latency.

        :param flag_key: the flag key
        :param fallback_variant: the variant to use when no variant is selected
        :param context: the evaluation context
        :param report_exposure: whether to send an exposure event when a variant is selected
        """
        try:
            start = current_time_millis()
            flags = self._requester.get_flags(context, flag_key)
            latency_ms = current_time_millis() - start

            data = flags.get(flag_key)
            if data is None:
                return fallback_variant
            selected = SelectedVariant.from_dict(data)
        except Exception as e:
            log.error("Failed to get variant for flag '%s': %s" % (flag_key, e))
            return fallback_variant

        if report_exposure:
            self._exposure_tracker.track(flag_key, selected, context, latency_ms)
        return selected

    def get_all_variants(self, context: Dict[str, Any]) -> Optional[Dict[str, SelectedVariant]]:
        """Returns the variants the flags API selects for a context for all flags, or ``None`` if the
        request fails. No exposure events are sent.
        """
        try:
            flags = self._requester.get_flags(context)
            return {flag_key: SelectedVariant.from_dict(data) for flag_key, data in flags.items()}
        except Exception as e:
            log.error("Failed to get all remote variants: %s" % e)
            return None

    def track_exposure_event(self, flag_key: str, selected_variant: SelectedVariant, context: Dict[str, Any], latency_ms: Optional[int] = None):
        self._exposure_tracker.track(flag_key, selected_variant, context, latency_ms)
