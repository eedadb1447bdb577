import csv

import pool_chemistry


def _answers(*values):
    it = iter(values)
    return lambda prompt: next(it)


def test_prompt_volume_keeps_default():
    assert pool_chemistry.prompt_volume(15000, _answers("")) == 15000


def test_prompt_volume_reprompts_until_positive(capsys):
    assert pool_chemistry.prompt_volume(15000, _answers("abc", "-5", "0", "12000")) == 12000
    assert capsys.readouterr().out.count("positive number") == 3


def test_collect_readings():
    prompts = []

    def fake_input(prompt):
        prompts.append(prompt)
        return {0: "7.0", 1: "", 2: "140", 3: "abc", 4: "3000"}[len(prompts) - 1]

    readings = pool_chemistry.collect_readings(fake_input)
    assert readings == {"ph": 7.0, "fc": None, "ta": 140, "cya": None, "salt": 3000}
    assert prompts[0] == "Current pH (target: 7.2-7.6): "
    assert prompts[2] == "Current Total Alkalinity (target: 80-120 ppm): "


def test_report_lines():
    readings = {"ph": 7.0, "fc": None, "ta": 140, "cya": None, "salt": 3000}
    assert pool_chemistry.report_lines(readings, 10000) == [
        "pH is low (7.0). Add ~6.0 oz of soda ash to raise pH.",
        "Alkalinity is high (140 ppm). Add ~52.0 oz of muriatic acid.",
        "Free Chlorine is not measured",
        "CYA is not measured",
        "Salt is in range",
        "Readings: pH: 7.0 • TA: 140 • Salt: 3000",
    ]


def test_report_lines_without_readings():
    lines = pool_chemistry.report_lines({}, 10000)
    assert len(lines) == 5
    assert all(line.endswith("not measured") for line in lines)


def test_save_to_file_writes_header_once(tmp_path):
    readings = {"ph": 7.0, "fc": None, "ta": 140, "cya": None, "salt": 3000}
    filename = pool_chemistry.save_to_file("spa", "2026-10-19", 500, readings, directory=str(tmp_path))
    pool_chemistry.save_to_file("spa", "2026-10-20", 500, {"ph": 7.4}, directory=str(tmp_path))

    with open(filename, newline="") as f:
        rows = list(csv.reader(f))
    assert rows == [
        ["Date", "Volume", "ph", "fc", "ta", "cya", "salt"],
        ["2026-10-19", "500", "7.0", "", "140", "", "3000"],
        ["2026-10-20", "500", "7.4", "", "", "", ""],
    ]
