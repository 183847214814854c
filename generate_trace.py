# generate_trace.py

from solver import solve_cryptarithm

if __name__ == "__main__":
    outcome = solve_cryptarithm(["SEND", "MORE"], ["MONEY"], trace_path="trace.json")

    print(f"{outcome!r}")
    print("Trace saved to trace.json")
