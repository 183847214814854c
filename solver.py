# solver.py
# Cryptarithm solver backed by the z3 SMT engine.
# - One z3 Context/Solver per solve call (SolveSession), nothing global
# - Letters are case sensitive and kept in first-seen order
# - Emits trace.json events (START .. SOLVER_DONE) for the web visualizer
# - Every model is re-checked numerically before it is returned

import json
import logging

import z3

from solver_basic import check_assignment, word_value

logger = logging.getLogger(__name__)

STATUS_SAT = "sat"
STATUS_UNSAT = "unsat"
STATUS_UNKNOWN = "unknown"


# ---------- Errors ----------
class CryptarithmError(Exception):
    """Base class for solver failures."""


class InvalidInput(CryptarithmError, ValueError):
    """The word lists cannot describe a puzzle (empty side, empty word, non-letter)."""


class EngineInternalError(CryptarithmError, RuntimeError):
    """z3 reported sat but the model cannot be turned into a valid assignment."""


# ---------- Results ----------
class Solution:
    ok = True
    status = STATUS_SAT

    def __init__(self, assignment, trace=None):
        self.assignment = {k: assignment[k] for k in sorted(assignment)}
        self.trace = trace if trace is not None else []

    def digits_for(self, word):
        """Digit string for word; a letter outside the assignment is an internal error."""
        digits = []
        for ch in word:
            if ch not in self.assignment:
                raise EngineInternalError(f"letter {ch!r} of {word!r} has no assigned digit")
            digits.append(str(self.assignment[ch]))
        return "".join(digits)

    def value_of(self, word):
        return int(self.digits_for(word))

    def __repr__(self):
        return f"Solution({self.assignment!r})"


class NoSolution:
    ok = False

    def __init__(self, status=STATUS_UNSAT, reason=None, trace=None):
        self.status = status
        self.reason = reason
        self.trace = trace if trace is not None else []

    def __repr__(self):
        return f"NoSolution(status={self.status!r})"


# ---------- Trace utilities ----------
class TraceWriter:
    def __init__(self, path=None):
        self.path = path
        self.events = []
        self._write_now()  # create/overwrite file

    def _write_now(self):
        if self.path is None:
            return
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(self.events, f, indent=2)

    def add(self, ev):
        self.events.append(ev)
        # write after every event so front-end can poll/update
        self._write_now()


# ---------- Session ----------
class SolveSession:
    """Owns the z3 context, solver and letter variables of a single solve."""

    def __init__(self, timeout_ms=None):
        self.ctx = z3.Context()
        self.solver = z3.Solver(ctx=self.ctx)
        if timeout_ms is not None:
            self.solver.set("timeout", int(timeout_ms))
        self.variables = {}

    def int_val(self, n):
        return z3.IntVal(n, ctx=self.ctx)

    def add(self, constraint):
        self.solver.add(constraint)


# ---------- Input checks ----------
def validate_words(lhs_words, rhs_words):
    # a bare string would otherwise be split into one-letter words
    for side, words in (("left", lhs_words), ("right", rhs_words)):
        if not isinstance(words, (list, tuple)):
            raise InvalidInput(f"{side}-hand side must be a list of words, got {type(words).__name__}")
    if not lhs_words:
        raise InvalidInput("left-hand side has no words")
    if not rhs_words:
        raise InvalidInput("right-hand side has no words")
    for side, words in (("left", lhs_words), ("right", rhs_words)):
        for w in words:
            if not isinstance(w, str):
                raise InvalidInput(f"{side}-hand side word {w!r} is not a string")
            if not w:
                raise InvalidInput(f"{side}-hand side contains an empty word")
            if not w.isalpha():
                raise InvalidInput(f"word {w!r} contains non-alphabetic characters")


# ---------- Model building ----------
def extract_letters(lhs_words, rhs_words):
    """Distinct letters across both sides, in order of first appearance."""
    letters = []
    seen = set()
    for w in list(lhs_words) + list(rhs_words):
        for ch in w:
            if ch not in seen:
                seen.add(ch)
                letters.append(ch)
    return letters


def generate_variables(session, letters):
    for letter in letters:
        session.variables[letter] = z3.Int(letter, ctx=session.ctx)
    return session.variables


def word_term(session, word):
    # least significant character first, multiplier grows by 10 per step
    term = session.int_val(0)
    multiplier = 1
    for ch in reversed(word):
        term = term + session.variables[ch] * multiplier
        multiplier *= 10
    return term


def add_constraints(session, lhs_words, rhs_words):
    variables = session.variables
    zero = session.int_val(0)
    one = session.int_val(1)
    nine = session.int_val(9)

    for var in variables.values():
        session.add(var >= zero)
        session.add(var <= nine)

    # Ensure the first character of each word is non-zero
    for word in list(lhs_words) + list(rhs_words):
        session.add(variables[word[0]] >= one)

    # every letter gets its own digit
    if len(variables) > 1:
        session.add(z3.Distinct(*variables.values()))

    lhs_sum = session.int_val(0)
    for word in lhs_words:
        lhs_sum = lhs_sum + word_term(session, word)

    rhs_sum = session.int_val(0)
    for word in rhs_words:
        rhs_sum = rhs_sum + word_term(session, word)

    session.add(lhs_sum == rhs_sum)
    return len(session.solver.assertions())


# ---------- Model decoding ----------
def extract_assignment(session, model):
    assignment = {}
    for letter, var in session.variables.items():
        value = model.eval(var, model_completion=True)
        if not z3.is_int_value(value):
            raise EngineInternalError(f"model has no integer value for {letter!r}: {value}")
        digit = value.as_long()
        if not 0 <= digit <= 9:
            raise EngineInternalError(f"model assigned {digit} to {letter!r}")
        assignment[letter] = digit
    return assignment


# ---------- Main solver API ----------
def check_timeout(timeout_ms):
    if timeout_ms is None:
        return None
    if isinstance(timeout_ms, bool) or not isinstance(timeout_ms, int) or timeout_ms < 0:
        raise InvalidInput(f"timeout must be a non-negative number of milliseconds, got {timeout_ms!r}")
    return timeout_ms


def run_session(session, lhs_words, rhs_words, trace):
    letters = extract_letters(lhs_words, rhs_words)
    logger.debug("letters %s", "".join(letters))
    trace.add({"type": "LETTERS", "letters": letters})

    generate_variables(session, letters)
    count = add_constraints(session, lhs_words, rhs_words)
    logger.debug("asserted %d constraints over %d letters", count, len(letters))
    trace.add({"type": "CONSTRAINTS", "count": count})

    result = session.solver.check()
    logger.debug("check returned %s", result)
    trace.add({"type": "CHECK", "result": str(result)})

    if result == z3.sat:
        assignment = extract_assignment(session, session.solver.model())
        problems = check_assignment(lhs_words, rhs_words, assignment)
        if problems:
            raise EngineInternalError("model violates the puzzle: " + "; ".join(problems))
        lhs_total = sum(word_value(w, assignment) for w in lhs_words)
        trace.add({"type": "END", "result": assignment, "reason": "solution found", "total": lhs_total})
        return Solution(assignment, trace.events)
    if result == z3.unsat:
        trace.add({"type": "END", "result": None, "reason": "no solution found"})
        return NoSolution(STATUS_UNSAT, "no solution found", trace.events)

    reason = session.solver.reason_unknown()
    logger.warning("z3 could not decide the puzzle: %s", reason)
    trace.add({"type": "END", "result": None, "reason": reason})
    return NoSolution(STATUS_UNKNOWN, reason, trace.events)


def solve_cryptarithm(lhs_words, rhs_words, timeout_ms=None, trace_path=None):
    """
    lhs_words: words summed on the left, e.g. ["SEND", "MORE"]
    rhs_words: words summed on the right, e.g. ["MONEY"]
    timeout_ms: optional z3 timeout; an expired check gives NoSolution("unknown")
    trace_path: where to write trace.json (None keeps the trace in memory)
    Returns: Solution or NoSolution. Raises InvalidInput / EngineInternalError.
    """
    validate_words(lhs_words, rhs_words)
    timeout_ms = check_timeout(timeout_ms)
    lhs_words = list(lhs_words)
    rhs_words = list(rhs_words)

    trace = TraceWriter(trace_path)
    trace.add({"type": "START", "lhs": lhs_words, "rhs": rhs_words, "timeout_ms": timeout_ms})

    try:
        return run_session(SolveSession(timeout_ms), lhs_words, rhs_words, trace)
    except Exception as e:
        trace.add({"type": "END", "result": None, "reason": f"solver error: {e}"})
        raise
    finally:
        # Mark solver completion explicitly so /trace can detect it
        trace.add({
            "type": "SOLVER_DONE",
            "note": "Solver finished writing full trace."
        })
