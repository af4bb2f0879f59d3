from mpflags.evaluation import SelectedVariant
from mpflags.impl.evaluator import Evaluator
from mpflags.impl.hashing import normalized_hash
from mpflags.testing.builders import *

evaluator = Evaluator()

# Bucket values for the variant salt of flag "f1" without a hash salt ("f1variant"):
# user1 -> 0.97, user2 -> 0.14, user3 -> 0.55


def test_missing_context_attribute_gives_no_variant():
    flag = make_on_off_flag('f1').build()
    assert evaluator.evaluate(flag, {}) is None


def test_empty_context_attribute_gives_no_variant():
    flag = make_on_off_flag('f1').build()
    assert evaluator.evaluate(flag, {'distinct_id': ''}) is None


def test_custom_context_attribute_is_used_for_bucketing():
    flag = make_on_off_flag('f1').context('company_id').build()
    assert evaluator.evaluate(flag, {'distinct_id': 'user1'}) is None
    assert evaluator.evaluate(flag, {'distinct_id': 'user1', 'company_id': 'c1'}).variant_key == 'on'


def test_zero_percent_rollout_never_matches():
    flag = make_on_off_flag('f1', 0).build()
    for i in range(200):
        assert evaluator.evaluate(flag, {'distinct_id': 'user-%d' % i}) is None


def test_hundred_percent_rollout_always_matches():
    flag = make_on_off_flag('f1', 100).build()
    for i in range(200):
        result = evaluator.evaluate(flag, {'distinct_id': 'user-%d' % i})
        assert result is not None
        assert result.variant_value is True


def test_partial_rollout_matches_by_rollout_bucket():
    flag = make_on_off_flag('f1', 30).build()
    for i in range(200):
        distinct_id = 'user-%d' % i
        expected = normalized_hash(distinct_id, 'f1rollout') < 0.3
        assert (evaluator.evaluate(flag, {'distinct_id': distinct_id}) is not None) == expected


def test_rollout_salt_uses_hash_salt_and_index():
    flag = make_on_off_flag('f1', 30).hash_salt('s').build()
    for i in range(200):
        distinct_id = 'user-%d' % i
        expected = normalized_hash(distinct_id, 'f1s0') < 0.3
        assert (evaluator.evaluate(flag, {'distinct_id': distinct_id}) is not None) == expected


def test_later_rollout_is_tried_when_earlier_one_does_not_match():
    flag = FlagBuilder('f1').variant('A', 'a', 100).variant('B', 'b', 0) \
        .rollout(100, runtime_evaluation_definition={'plan': 'premium'}, variant_override='B') \
        .rollout(100).build()
    assert evaluator.evaluate(flag, {'distinct_id': 'user1'}).variant_key == 'A'
    premium = {'distinct_id': 'user1', 'custom_properties': {'plan': 'premium'}}
    assert evaluator.evaluate(flag, premium).variant_key == 'B'


def test_variant_split_selects_by_variant_bucket():
    flag = make_ab_flag('f1').build()
    assert evaluator.evaluate(flag, {'distinct_id': 'user1'}).variant_key == 'B'
    assert evaluator.evaluate(flag, {'distinct_id': 'user2'}).variant_key == 'A'
    assert evaluator.evaluate(flag, {'distinct_id': 'user3'}).variant_key == 'B'


def test_result_includes_experiment_details():
    flag = make_ab_flag('f1').experiment('exp-1', True).build()
    result = evaluator.evaluate(flag, {'distinct_id': 'user2'})
    assert result == SelectedVariant(variant_value='a-value', variant_key='A', experiment_id='exp-1', is_experiment_active=True, is_qa_tester=False)


def test_ab_split_assigns_both_variants_and_is_stable():
    flag = make_ab_flag('f1').build()
    seen = {}
    for i in range(200):
        distinct_id = 'user-%d' % i
        result = evaluator.evaluate(flag, {'distinct_id': distinct_id})
        seen.setdefault(result.variant_key, 0)
        seen[result.variant_key] += 1
        for _ in range(3):
            assert evaluator.evaluate(flag, {'distinct_id': distinct_id}).variant_key == result.variant_key
    assert set(seen.keys()) == {'A', 'B'}


def test_variant_splits_override_sends_everyone_to_one_variant():
    flag = FlagBuilder('f1').variant('A', 'a', 50).variant('B', 'b', 50).variant('C', 'c', 0) \
        .rollout(100, variant_splits={'A': 0, 'B': 0, 'C': 100}).build()
    for i in range(100):
        assert evaluator.evaluate(flag, {'distinct_id': 'user-%d' % i}).variant_key == 'C'


def test_splits_below_hundred_leave_remainder_to_last_variant():
    flag = FlagBuilder('f1').variant('A', 'a', 10).variant('B', 'b', 10).rollout(100).build()
    # user1 buckets at 0.97, beyond the 0.2 covered by the splits
    assert evaluator.evaluate(flag, {'distinct_id': 'user1'}).variant_key == 'B'
    # user2 buckets at 0.14
    assert evaluator.evaluate(flag, {'distinct_id': 'user2'}).variant_key == 'B'


def test_variant_override_wins_over_splits():
    flag = FlagBuilder('f1').variant('A', 'a', 100).variant('B', 'b', 0).rollout(100, variant_override='b').build()
    result = evaluator.evaluate(flag, {'distinct_id': 'user2'})
    assert result.variant_key == 'B'
    assert result.is_qa_tester is False


def test_unknown_variant_override_falls_back_to_splits():
    flag = FlagBuilder('f1').variant('A', 'a', 100).rollout(100, variant_override='missing').build()
    assert evaluator.evaluate(flag, {'distinct_id': 'user1'}).variant_key == 'A'


def test_matched_rollout_without_variants_gives_no_variant():
    flag = FlagBuilder('f1').rollout(100).build()
    assert evaluator.evaluate(flag, {'distinct_id': 'user1'}) is None


def test_test_user_override_wins():
    flag = make_on_off_flag('f1', 0).test_users({'qa-user': 'OFF'}).build()
    result = evaluator.evaluate(flag, {'distinct_id': 'qa-user'})
    assert result.variant_key == 'off'
    assert result.variant_value is False
    assert result.is_qa_tester is True


def test_test_user_override_with_unknown_variant_is_ignored():
    flag = make_on_off_flag('f1', 100).test_users({'qa-user': 'missing'}).build()
    result = evaluator.evaluate(flag, {'distinct_id': 'qa-user'})
    assert result.variant_key == 'on'
    assert result.is_qa_tester is False


def test_test_user_override_requires_bucketing_attribute():
    flag = make_on_off_flag('f1', 100).context('company_id').test_users({'qa-user': 'off'}).build()
    assert evaluator.evaluate(flag, {'distinct_id': 'qa-user'}) is None


def premium_flag():
    return FlagBuilder('f2').variant('on', True, 100).rollout(100, runtime_evaluation_definition={'plan': 'premium'}).build()


def test_runtime_definition_without_custom_properties_gives_no_variant():
    assert evaluator.evaluate(premium_flag(), {'distinct_id': 'user1'}) is None


def test_runtime_definition_with_other_value_gives_no_variant():
    context = {'distinct_id': 'user1', 'custom_properties': {'plan': 'basic'}}
    assert evaluator.evaluate(premium_flag(), context) is None


def test_runtime_definition_with_missing_property_gives_no_variant():
    context = {'distinct_id': 'user1', 'custom_properties': {'tier': 'premium'}}
    assert evaluator.evaluate(premium_flag(), context) is None


def test_runtime_definition_matches_case_insensitively():
    for plan in ('premium', 'PREMIUM', 'Premium'):
        context = {'distinct_id': 'user1', 'custom_properties': {'plan': plan}}
        assert evaluator.evaluate(premium_flag(), context).variant_value is True


def test_runtime_definition_compares_non_string_values_as_strings():
    flag = FlagBuilder('f2').variant('on', True, 100).rollout(100, runtime_evaluation_definition={'beta': 'true', 'seats': '5'}).build()
    context = {'distinct_id': 'user1', 'custom_properties': {'beta': True, 'seats': 5}}
    assert evaluator.evaluate(flag, context).variant_value is True


def test_runtime_definition_matches_integral_float_as_integer():
    flag = FlagBuilder('f2').variant('on', True, 100).rollout(100, runtime_evaluation_definition={'seats': 5}).build()
    context = {'distinct_id': 'user1', 'custom_properties': {'seats': 5.0}}
    assert evaluator.evaluate(flag, context).variant_value is True


def test_runtime_definition_matches_null_value():
    flag = FlagBuilder('f2').variant('on', True, 100).rollout(100, runtime_evaluation_definition={'plan': 'null'}).build()
    context = {'distinct_id': 'user1', 'custom_properties': {'plan': None}}
    assert evaluator.evaluate(flag, context).variant_value is True


def test_integral_float_buckets_like_integer_string():
    flag = FlagBuilder('f1').context('company_id').variant('A', 'a', 50).variant('B', 'b', 50).rollout(50).build()
    for i in range(1, 200):
        from_float = evaluator.evaluate(flag, {'company_id': float(i)})
        from_string = evaluator.evaluate(flag, {'company_id': str(i)})
        assert from_float == from_string
