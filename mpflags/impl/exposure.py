from typing import Any, Dict, Optional

from mpflags.evaluation import SelectedVariant
from mpflags.impl.util import log
from mpflags.interfaces import Tracker

EXPOSURE_EVENT = '$experiment_started'

EVALUATION_MODE_LOCAL = 'local'
EVALUATION_MODE_REMOTE = 'remote'


def exposure_event_properties(flag_key: str, selected_variant: SelectedVariant, distinct_id: Any, evaluation_mode: str, latency_ms: Optional[int] = None) -> Dict[str, Any]:
    properties = {
        'distinct_id': distinct_id,
        'Experiment name': flag_key,
        'Variant name': selected_variant.variant_key,
        '$experiment_type': 'feature_flag',
        'Flag evaluation mode': evaluation_mode,
    }  # type: Dict[str, Any]
    if latency_ms is not None:
        properties['Variant fetch latency (ms)'] = latency_ms
    if selected_variant.experiment_id is not None:
        properties['$experiment_id'] = selected_variant.experiment_id
    if selected_variant.is_experiment_active is not None:
        properties['$is_experiment_active'] = selected_variant.is_experiment_active
    if selected_variant.is_qa_tester is not None:
        properties['$is_qa_tester'] = selected_variant.is_qa_tester
    return properties


class ExposureTracker:
    """
    Reports that a context was exposed to a variant, by handing an ``$experiment_started`` event
    to the tracker function.

    Reporting is best-effort: nothing that goes wrong here is ever raised to the code that
    evaluated the flag.
    """

    def __init__(self, tracker: Optional[Tracker], evaluation_mode: str):
        self._tracker = tracker
        self._evaluation_mode = evaluation_mode

    @property
    def evaluation_mode(self) -> str:
        return self._evaluation_mode

    def track(self, flag_key: str, selected_variant: SelectedVariant, context: Dict[str, Any], latency_ms: Optional[int] = None):
        if self._tracker is None:
            return

        distinct_id = context.get('distinct_id') if isinstance(context, dict) else None
        if not distinct_id:
            log.error("Cannot track exposure event for flag '%s' without a distinct_id in the context" % flag_key)
            return

        properties = exposure_event_properties(flag_key, selected_variant, distinct_id, self._evaluation_mode, latency_ms)

        def on_complete(error: Optional[Exception] = None):
            if error is not None:
                log.error("Failed to track exposure event for flag '%s': %s" % (flag_key, error))

        try:
            self._tracker(EXPOSURE_EVENT, properties, on_complete)
        except Exception as e:
            log.error("Failed to track exposure event for flag '%s': %s" % (flag_key, repr(e)))
