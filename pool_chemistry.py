# Pool Chemistry Assistant - field service entry
from datetime import datetime
import csv
import curses
import os

from chemistry import CHEMICAL_RANGES, READING_FIELDS, RangeStatus, evaluate_readings, format_readings, parse_reading

# Pool profiles with default volumes (gallons)
pools = {
    "residential_pool": {"volume": 15000},
    "small_pool": {"volume": 10000},
    "large_pool": {"volume": 25000},
    "spa": {"volume": 500},
}

STATUS_TEXT = {
    RangeStatus.IN_RANGE.value: "in range",
    RangeStatus.OUT_OF_RANGE.value: "OUT OF RANGE",
    RangeStatus.NO_READING.value: "not measured",
}


def prompt_volume(default, input_fn=input):
    while True:
        raw = input_fn(f"Pool volume in gallons (default: {default}): ").strip()
        if not raw:
            return default
        volume = parse_reading(raw)
        if volume is not None and volume > 0:
            return volume
        print("Please enter a positive number of gallons.")


def collect_readings(input_fn=input):
    """Prompt for each reading; blank or unparseable input counts as not measured."""
    readings = {}
    for kind, field in READING_FIELDS.items():
        rng = CHEMICAL_RANGES[kind]
        unit = f" {rng.unit}" if rng.unit else ""
        readings[field] = parse_reading(
            input_fn(f"Current {rng.label} (target: {rng.min}-{rng.max}{unit}): "))
    return readings


def report_lines(readings, volume):
    lines = []
    for result in evaluate_readings(readings, volume).values():
        if result["recommendation"]:
            lines.append(result["recommendation"])
        else:
            lines.append(f"{result['label']} is {STATUS_TEXT[result['status']]}")
    summary = format_readings(readings)
    if summary:
        lines.append(f"Readings: {summary}")
    return lines


def save_to_file(pool, date, volume, readings, directory="."):
    filename = os.path.join(directory, f"{pool}_visits.csv")
    fields = list(READING_FIELDS.values())
    headers = ["Date", "Volume"] + fields
    row = [date, volume] + ["" if readings.get(f) is None else readings[f] for f in fields]

    with open(filename, "a", newline="") as f:
        writer = csv.writer(f)
        if f.tell() == 0:
            writer.writerow(headers)
        writer.writerow(row)
    return filename


def menu(stdscr):
    options = list(pools)
    current_row = 0
    curses.curs_set(0)

    while True:
        stdscr.clear()
        stdscr.addstr(0, 0, "Select pool (use arrow keys, press Enter):")
        for idx, option in enumerate(options):
            label = f"{option} ({pools[option]['volume']} gal)"
            if idx == current_row:
                stdscr.addstr(idx + 2, 0, f"> {label}", curses.A_REVERSE)
            else:
                stdscr.addstr(idx + 2, 0, f"  {label}")
        stdscr.refresh()

        key = stdscr.getch()
        if key == curses.KEY_UP and current_row > 0:
            current_row -= 1
        elif key == curses.KEY_DOWN and current_row < len(options) - 1:
            current_row += 1
        elif key == curses.KEY_ENTER or key in [10, 13]:
            return options[current_row]


def main():
    pool = curses.wrapper(menu)
    date = datetime.today().strftime("%Y-%m-%d")
    print(f"\nEntering readings for {pool} on {date}")
    volume = prompt_volume(pools[pool]["volume"])

    print("\nEnter current readings (leave blank if not tested):")
    readings = collect_readings()

    print("\nAdjustments:")
    for line in report_lines(readings, volume):
        print(line)

    filename = save_to_file(pool, date, volume, readings)
    print(f"Data saved to {filename}")


if __name__ == "__main__":
    main()
