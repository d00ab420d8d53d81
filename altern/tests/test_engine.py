import unittest

from altern.grammar.ast import Alternative, Grammar, Literal, Ref, Rule
from altern.match.engine import (
    NOT_STARTED, AppendMatcher, IterateLast, PatternMatcher, Rewind, Valid,
)
from altern.match.pattern import Pattern

FUNPAR = 0
FUNID = 1
PARID = 2


def lit_rule(*texts):
    return Rule(tuple(Alternative.of(Literal(t)) for t in texts))


def make_funpar():
    funpar = Rule.of(Alternative.of(
        Ref(FUNID), Literal("("), Ref(PARID), Literal(", "), Ref(PARID), Literal(")"),
    ))
    return Grammar([funpar, lit_rule("f", "g"), lit_rule("x", "y")])


def enumerate_flat(grammar, key, text, bound=1000):
    m = PatternMatcher(grammar, key, text)
    found = []
    for _ in range(bound):
        m.find_next()
        if m.is_exhausted:
            return found
        found.append((m.flat_pattern(), m.consumed))
    raise AssertionError("enumeration did not terminate")


class TestWorkedExample(unittest.TestCase):

    def setUp(self):
        self.g = make_funpar()

    def test_first_match(self):
        m = PatternMatcher(self.g, FUNPAR, "f(x, y)")
        m.find_next()
        self.assertTrue(m.is_matched)
        self.assertEqual(m.flat_pattern(), [0, 0, 0, 1])
        self.assertEqual(m.pattern(), Pattern(0, (Pattern(0), Pattern(0), Pattern(1))))
        self.assertEqual(m.consumed, "f(x, y)")
        self.assertEqual(m.leftover, "")

    def test_exhausts_after_single_match(self):
        self.assertEqual(enumerate_flat(self.g, FUNPAR, "f(x, y)"), [([0, 0, 0, 1], "f(x, y)")])

    def test_every_combination_is_reachable(self):
        for fn, fv in (("f", 0), ("g", 1)):
            for a, av in (("x", 0), ("y", 1)):
                for b, bv in (("x", 0), ("y", 1)):
                    text = f"{fn}({a}, {b})"
                    self.assertEqual(enumerate_flat(self.g, FUNPAR, text),
                                     [([0, fv, av, bv], text)])

    def test_trailing_input_is_leftover(self):
        m = PatternMatcher(self.g, FUNPAR, "g(y, x) + rest")
        m.find_next()
        self.assertEqual(m.flat_pattern(), [0, 1, 1, 0])
        self.assertEqual(m.end, 7)
        self.assertEqual(m.leftover, " + rest")

    def test_no_match(self):
        m = PatternMatcher(self.g, FUNPAR, "h(x, y)")
        m.find_next()
        self.assertTrue(m.is_exhausted)
        self.assertFalse(m.is_matched)
        self.assertEqual(m.children, [])


class TestPriorityOrder(unittest.TestCase):

    def test_rightmost_child_varies_fastest(self):
        # S : A A ;  A : "" | "" ;  every combination matches
        g = Grammar([
            Rule.of(Alternative.of(Ref(1), Ref(1))),
            lit_rule("", ""),
        ])
        flats = [f for f, _ in enumerate_flat(g, 0, "anything")]
        self.assertEqual(flats, [[0, 0, 0], [0, 0, 1], [0, 1, 0], [0, 1, 1]])

    def test_own_alternative_varies_slowest(self):
        # S : A | A "!" ;  A : "a" | "" ;
        g = Grammar([
            Rule.of(Alternative.of(Ref(1)), Alternative.of(Ref(1), Literal("!"))),
            lit_rule("a", ""),
        ])
        self.assertEqual(enumerate_flat(g, 0, "a!"), [
            ([0, 0], "a"),
            ([0, 1], ""),
            ([1, 0], "a!"),
        ])

    def test_ambiguous_split(self):
        # S : X X ;  X : "a" | "aa" ;
        g = Grammar([
            Rule.of(Alternative.of(Ref(1), Ref(1))),
            lit_rule("a", "aa"),
        ])
        self.assertEqual(enumerate_flat(g, 0, "aaa"), [
            ([0, 0, 0], "aa"),
            ([0, 0, 1], "aaa"),
            ([0, 1, 0], "aaa"),
        ])


class TestEdgeCases(unittest.TestCase):

    def test_literal_longer_than_input(self):
        g = Grammar([lit_rule("abc", "ab", "a")])
        self.assertEqual(enumerate_flat(g, 0, "ab"), [([1], "ab"), ([2], "a")])

    def test_empty_input(self):
        g = Grammar([lit_rule("x", "")])
        self.assertEqual(enumerate_flat(g, 0, ""), [([1], "")])

    def test_deterministic_rule(self):
        g = Grammar([lit_rule("ok")])
        m = PatternMatcher(g, 0, "ok")
        m.find_next()
        self.assertEqual(m.flat_pattern(), [0])
        m.find_next()
        self.assertTrue(m.is_exhausted)

    def test_rule_without_alternatives_is_exhausted(self):
        g = Grammar([Rule(())])
        m = PatternMatcher(g, 0, "x")
        m.find_next()
        self.assertTrue(m.is_exhausted)

    def test_dead_sub_rule_backtracks_parent(self):
        # S : DEAD | "x" ;  DEAD : (no alternatives)
        g = Grammar([
            Rule.of(Alternative.of(Ref(1)), Alternative.of(Literal("x"))),
            Rule(()),
        ])
        self.assertEqual(enumerate_flat(g, 0, "x"), [([1], "x")])

    def test_literal_after_child_backtracks_into_child(self):
        # S : A "c" ;  A : "a" | "ab" ;
        g = Grammar([
            Rule.of(Alternative.of(Ref(1), Literal("c"))),
            lit_rule("a", "ab"),
        ])
        self.assertEqual(enumerate_flat(g, 0, "abc"), [([0, 1], "abc")])

    def test_right_recursion(self):
        # LIST : ITEM "," LIST | ITEM ;  ITEM : "a" | "b" ;
        g = Grammar([
            Rule.of(Alternative.of(Ref(1), Literal(","), Ref(0)), Alternative.of(Ref(1))),
            lit_rule("a", "b"),
        ])
        self.assertEqual(enumerate_flat(g, 0, "a,b"), [
            ([0, 0, 1, 1], "a,b"),
            ([1, 0], "a"),
        ])

    def test_left_recursion_is_not_detected(self):
        # E : E "+" "a" | "a" ;
        g = Grammar([
            Rule.of(Alternative.of(Ref(0), Literal("+"), Literal("a")), Alternative.of(Literal("a"))),
        ])
        m = PatternMatcher(g, 0, "a+a")
        with self.assertRaises(RecursionError):
            m.find_next()

    def test_start_offset(self):
        g = make_funpar()
        m = PatternMatcher(g, PARID, "f(x, y)", 5)
        m.find_next()
        self.assertEqual(m.flat_pattern(), [1])
        self.assertEqual((m.pos, m.end), (5, 6))
        self.assertEqual(m.consumed, "y")


class TestMatcherState(unittest.TestCase):

    def setUp(self):
        self.g = make_funpar()

    def test_initial_state(self):
        m = PatternMatcher(self.g, FUNPAR, "f(x, y)")
        self.assertEqual(m.variant, NOT_STARTED)
        self.assertTrue(m.is_unfinished)
        self.assertFalse(m.is_matched)
        with self.assertRaises(RuntimeError):
            m.end

    def test_no_current_alternative_before_first_attempt(self):
        m = PatternMatcher(self.g, PARID, "y")
        with self.assertRaises(RuntimeError):
            m.alternative()
        with self.assertRaises(RuntimeError):
            m.term_cursor()
        with self.assertRaises(RuntimeError):
            m.iteration_state()

    def test_no_current_alternative_once_exhausted(self):
        m = PatternMatcher(self.g, PARID, "z")
        m.find_next()
        self.assertTrue(m.is_exhausted)
        with self.assertRaises(RuntimeError):
            m.alternative()
        with self.assertRaises(RuntimeError):
            m.terms_left()
        with self.assertRaises(RuntimeError):
            m.iteration_state()

    def test_exhausted_find_next_is_noop(self):
        m = PatternMatcher(self.g, FUNPAR, "f(x, y)")
        m.find_next()
        m.find_next()
        self.assertTrue(m.is_exhausted)
        variant = m.variant
        for _ in range(3):
            m.find_next()
            self.assertTrue(m.is_exhausted)
            self.assertEqual(m.variant, variant)

    def test_children_never_exceed_refs(self):
        m = PatternMatcher(self.g, FUNPAR, "f(x, y)")
        m.find_next()
        self.assertEqual(len(m.children), m.alternative().ref_count)
        self.assertEqual([c.key for c in m.children], [FUNID, PARID, PARID])
        self.assertEqual([c.pos for c in m.children], [0, 2, 5])

    def test_iteration_states(self):
        m = PatternMatcher(self.g, FUNPAR, "f(x, y)")
        m.variant = 0
        self.assertEqual(m.iteration_state(), AppendMatcher(FUNID, 0))

        child = PatternMatcher(self.g, FUNID, "f(x, y)", 0)
        child.find_next()
        m.children.append(child)
        self.assertEqual(m.term_cursor(), 1)
        self.assertEqual(m.iteration_state(), AppendMatcher(PARID, 2))

        child = PatternMatcher(self.g, PARID, "f(x, y)", 2)
        child.find_next()
        m.children.append(child)
        child = PatternMatcher(self.g, PARID, "f(x, y)", 5)
        child.find_next()  # "x" does not fit at 5, settles on "y"
        m.children.append(child)
        self.assertEqual(m.iteration_state(), Valid(7))

        m.children[-1].find_next()
        self.assertEqual(m.iteration_state(), Rewind())

    def test_iterate_last_on_mismatch(self):
        m = PatternMatcher(self.g, FUNPAR, "f[x, y]")
        m.variant = 0
        child = PatternMatcher(self.g, FUNID, "f[x, y]", 0)
        child.find_next()
        m.children.append(child)
        self.assertEqual(m.iteration_state(), IterateLast())

    def test_terms_left(self):
        m = PatternMatcher(self.g, FUNPAR, "f(x, y)")
        m.find_next()
        self.assertEqual(m.terms_left(), (Literal(")"),))


class TestPatternExtraction(unittest.TestCase):

    def test_idempotent(self):
        m = PatternMatcher(make_funpar(), FUNPAR, "f(x, y)")
        m.find_next()
        self.assertEqual(m.pattern(), m.pattern())
        self.assertEqual(m.flat_pattern(), m.flat_pattern())

    def test_snapshot_is_independent(self):
        g = Grammar([
            Rule.of(Alternative.of(Ref(1), Ref(1))),
            lit_rule("", ""),
        ])
        m = PatternMatcher(g, 0, "")
        m.find_next()
        first = m.pattern()
        m.find_next()
        self.assertEqual(first, Pattern(0, (Pattern(0), Pattern(0))))
        self.assertEqual(m.pattern(), Pattern(0, (Pattern(0), Pattern(1))))

    def test_flatten_matches_pattern_with(self):
        m = PatternMatcher(make_funpar(), FUNPAR, "g(x, x)")
        m.find_next()
        self.assertEqual(m.pattern().flatten(), m.flat_pattern())
        self.assertEqual(m.pattern().size, 4)


if __name__ == "__main__":
    unittest.main()
