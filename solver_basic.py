# solver_basic.py
# Engine-free helpers: numeric evaluation, assignment checking and a
# brute-force permutation solver used to cross-check small puzzles.

from itertools import permutations


def word_value(word, assignment):
    """Base-10 value of word under assignment (KeyError on an unknown letter)."""
    value = 0
    for ch in word:
        value = value * 10 + assignment[ch]
    return value


def check_assignment(lhs_words, rhs_words, assignment):
    """
    Returns a list of human readable violations; empty when the assignment
    solves lhs_words summed == rhs_words summed.
    """
    problems = []
    all_words = list(lhs_words) + list(rhs_words)

    letters = []
    for w in all_words:
        for ch in w:
            if ch not in letters:
                letters.append(ch)

    missing = [ch for ch in letters if ch not in assignment]
    if missing:
        problems.append(f"unassigned letters: {''.join(missing)}")
        return problems

    for ch in letters:
        if not 0 <= assignment[ch] <= 9:
            problems.append(f"{ch}={assignment[ch]} is not a digit")

    used = [assignment[ch] for ch in letters]
    if len(set(used)) < len(used):
        problems.append("two letters share a digit")

    for w in all_words:
        if assignment[w[0]] == 0:
            problems.append(f"{w} has a leading zero")

    lhs_total = sum(word_value(w, assignment) for w in lhs_words)
    rhs_total = sum(word_value(w, assignment) for w in rhs_words)
    if lhs_total != rhs_total:
        problems.append(f"{lhs_total} != {rhs_total}")

    return problems


def solve_by_permutation(lhs_words, rhs_words):
    all_words = list(lhs_words) + list(rhs_words)
    letters = sorted(set("".join(all_words)))
    if len(letters) > 10:
        return None

    leading = set(w[0] for w in all_words)

    for perm in permutations(range(10), len(letters)):
        assign = dict(zip(letters, perm))

        # leading digits cannot be zero
        if any(assign[ch] == 0 for ch in leading):
            continue

        lhs_total = sum(word_value(w, assign) for w in lhs_words)
        rhs_total = sum(word_value(w, assign) for w in rhs_words)
        if lhs_total == rhs_total:
            return assign  # Success

    return None  # No solution found


if __name__ == "__main__":
    solution = solve_by_permutation(["SEND", "MORE"], ["MONEY"])
    if solution:
        print("Solution found:")
        for k in sorted(solution.keys()):
            print(f"{k} = {solution[k]}")
    else:
        print("No solution")
