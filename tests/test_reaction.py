"""Tests for Reaction and reaction()."""

import pytest

from babymobx import Reaction, observable, reaction, currently_tracking


class TestReaction:
    def test_fires_when_predicate_becomes_true(self):
        value = observable(False)
        count = 0

        def effect():
            nonlocal count
            count += 1

        reaction(lambda: value.get(), effect)
        assert count == 0

        value.set(True)
        assert count == 1

        value.set(False)
        assert count == 1

        value.set(True)
        assert count == 2

    def test_fires_immediately_when_predicate_true(self):
        value = observable(True)
        effects = []
        r = reaction(lambda: value.get(), lambda: effects.append("fired"))
        assert isinstance(r, Reaction)
        assert effects == ["fired"]

    def test_no_rerun_when_set_to_same_value(self):
        value = observable(True)
        effects = []
        reaction(lambda: value.get(), lambda: effects.append("fired"))
        value.set(True)
        assert effects == ["fired"]

    def test_unrelated_observable_does_not_rerun(self):
        x = observable(1)
        y = observable(1)
        evaluations = []
        reaction(lambda: evaluations.append(x.get()) is None, lambda: None)
        y.set(2)
        assert evaluations == [1]

    def test_fires_on_every_change_while_true(self):
        n = observable(1)
        effects = []
        reaction(lambda: n.get() > 0, lambda: effects.append("positive"))
        n.set(2)
        n.set(3)
        assert effects == ["positive", "positive", "positive"]

    def test_effect_reads_are_not_tracked(self):
        trigger = observable(True)
        other = observable("a")
        effects = []
        reaction(lambda: trigger.get(), lambda: effects.append(other.peek()))
        other.set("b")
        assert effects == ["a"]
        assert other.subscriber_count == 0

    def test_repr(self):
        value = observable(False)

        def is_ready():
            return value.get()

        r = reaction(is_ready, lambda: None)
        assert repr(r) == "Reaction(is_ready, active)"


class TestReentrancy:
    def test_effect_set_runs_nested_fanout_synchronously(self):
        source = observable(0)
        mirror = observable(0)
        order = []

        reaction(lambda: source.get() > 0, lambda: (order.append("outer"), mirror.set(source.peek())))
        reaction(lambda: mirror.get() > 0, lambda: order.append("nested"))
        reaction(lambda: source.get() > 0, lambda: order.append("outer-second"))

        source.set(1)
        assert order == ["outer", "nested", "outer-second"]
        assert mirror.peek() == 1

    def test_cycle_is_not_guarded(self):
        counter = observable(0)

        def bump():
            counter.set(counter.peek() + 1)

        with pytest.raises(RecursionError):
            reaction(lambda: counter.get() >= 0, bump)


class TestReactionErrors:
    def test_raising_predicate_releases_tracking(self):
        o = observable(1)

        def predicate():
            if o.get() == 2:
                raise RuntimeError("bad predicate")
            return False

        reaction(predicate, lambda: None)
        with pytest.raises(RuntimeError):
            o.set(2)
        assert currently_tracking() is None

    def test_raising_initial_predicate_leaves_no_subscription(self):
        o = observable(1)

        def predicate():
            o.get()
            raise RuntimeError("bad predicate")

        with pytest.raises(RuntimeError):
            reaction(predicate, lambda: None)
        assert o.subscriber_count == 0

    def test_raising_effect_propagates(self):
        o = observable(False)

        def effect():
            raise RuntimeError("bad effect")

        reaction(lambda: o.get(), effect)
        with pytest.raises(RuntimeError):
            o.set(True)
        assert currently_tracking() is None


class TestReactionDispose:
    def test_dispose_stops(self):
        o = observable(False)
        effects = []
        r = reaction(lambda: o.get(), lambda: effects.append("fired"))
        r.dispose()
        assert r.disposed
        o.set(True)
        assert effects == []
        assert o.subscriber_count == 0
        assert "disposed" in repr(r)

    def test_dispose_from_earlier_subscriber_skips_later_one(self):
        o = observable(0)
        effects = []
        victim = []

        reaction(lambda: o.get() > 0, lambda: victim[0].dispose())
        victim.append(reaction(lambda: o.get() > 0, lambda: effects.append("victim")))

        o.set(1)
        assert effects == []
