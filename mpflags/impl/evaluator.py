from typing import Any, Dict, List, Optional

from mpflags.evaluation import SelectedVariant
from mpflags.impl.hashing import normalized_hash
from mpflags.impl.model import FlagDefinition, Rollout, Variant
from mpflags.impl.util import log, stringify_value

# The rules for evaluating a flag definition against a context:
#
# 1. The context must have a non-empty value for the attribute named by the flag's "context"
#    property. That value is what gets hashed for bucketing.
# 2. A test user override for the context's distinct_id wins over everything else.
# 3. Otherwise the rollouts are tried in order. A context matches a rollout if its bucket falls
#    within the rollout percentage and it satisfies all of the rollout's runtime predicates.
# 4. The matched rollout's variant override, or else the weighted split of the variants,
#    determines the variant.
#
# A result of None means that the caller's fallback should be used. Exposure events are not the
# evaluator's concern; the providers send them.

DISTINCT_ID_ATTRIBUTE = 'distinct_id'
CUSTOM_PROPERTIES_ATTRIBUTE = 'custom_properties'


def _rollout_salt(flag: FlagDefinition, index: int) -> str:
    if flag.hash_salt is not None:
        return flag.key + flag.hash_salt + str(index)
    return flag.key + 'rollout'


def _variant_salt(flag: FlagDefinition) -> str:
    return flag.key + (flag.hash_salt or '') + 'variant'


def _bucketing_value(flag: FlagDefinition, context: Dict[str, Any]) -> Optional[str]:
    value = context.get(flag.context)
    if not value:
        return None
    return stringify_value(value)


def _find_variant(flag: FlagDefinition, variant_key: str) -> Optional[Variant]:
    wanted = variant_key.lower()
    for variant in flag.ruleset.variants:
        if variant.key.lower() == wanted:
            return variant
    return None


def _selected(flag: FlagDefinition, variant: Variant, is_qa_tester: bool) -> SelectedVariant:
    return SelectedVariant(
        variant_value=variant.value,
        variant_key=variant.key,
        experiment_id=flag.experiment_id,
        is_experiment_active=flag.is_experiment_active,
        is_qa_tester=is_qa_tester,
    )


def _runtime_evaluation_satisfied(rollout: Rollout, context: Dict[str, Any]) -> bool:
    definition = rollout.runtime_evaluation_definition
    if not definition:
        return True

    custom_properties = context.get(CUSTOM_PROPERTIES_ATTRIBUTE)
    if not isinstance(custom_properties, dict):
        return False

    for name, expected in definition.items():
        if name not in custom_properties:
            return False
        if stringify_value(custom_properties[name]).lower() != stringify_value(expected).lower():
            return False
    return True


def _effective_splits(variants: List[Variant], rollout: Rollout) -> List[float]:
    overrides = rollout.variant_splits or {}
    return [overrides.get(v.key, v.split) or 0 for v in variants]


class Evaluator:
    """
    Decides which variant of a flag definition a context receives. Evaluation only reads the
    definition it is given, so an instance can be shared by any number of threads.
    """

    def evaluate(self, flag: FlagDefinition, context: Dict[str, Any]) -> Optional[SelectedVariant]:
        bucketing_value = _bucketing_value(flag, context)
        if bucketing_value is None:
            log.warning("The variant assignment key '%s' for flag '%s' is not present in the supplied context" % (flag.context, flag.key))
            return None

        test_variant = self._test_user_variant(flag, context)
        if test_variant is not None:
            return test_variant

        rollout = self._assigned_rollout(flag, bucketing_value, context)
        if rollout is None:
            return None
        return self._assigned_variant(flag, bucketing_value, rollout)

    def _test_user_variant(self, flag: FlagDefinition, context: Dict[str, Any]) -> Optional[SelectedVariant]:
        test = flag.ruleset.test
        if test is None:
            return None
        distinct_id = context.get(DISTINCT_ID_ATTRIBUTE)
        if not distinct_id:
            return None
        variant_key = test.variant_key_for(distinct_id)
        if not variant_key:
            return None
        variant = _find_variant(flag, variant_key)
        if variant is None:
            log.debug("Test user override for flag '%s' names unknown variant '%s'", flag.key, variant_key)
            return None
        return _selected(flag, variant, True)

    def _assigned_rollout(self, flag: FlagDefinition, bucketing_value: str, context: Dict[str, Any]) -> Optional[Rollout]:
        for index, rollout in enumerate(flag.ruleset.rollout):
            rollout_hash = normalized_hash(bucketing_value, _rollout_salt(flag, index))
            if rollout_hash < rollout.rollout_percentage / 100.0 and _runtime_evaluation_satisfied(rollout, context):
                return rollout
        return None

    def _assigned_variant(self, flag: FlagDefinition, bucketing_value: str, rollout: Rollout) -> Optional[SelectedVariant]:
        if rollout.variant_override is not None:
            variant = _find_variant(flag, rollout.variant_override)
            if variant is not None:
                return _selected(flag, variant, False)

        variants = flag.ruleset.variants
        if not variants:
            return None

        variant_hash = normalized_hash(bucketing_value, _variant_salt(flag))
        # Whatever share the splits leave unassigned goes to the last variant.
        selected = variants[-1]
        cumulative = 0.0
        for variant, split in zip(variants, _effective_splits(variants, rollout)):
            cumulative += split / 100.0
            if variant_hash < cumulative:
                selected = variant
                break
        return _selected(flag, selected, False)
