import json

from agents.flow_controller import CONCLUSION_MESSAGES
from config.policy import load_yaml_file
from interview_session.replay_cli import ReplayScript, main, replay

SCRIPT = """
interview_id: cli
seed: 3
policy:
  accountability_probability: 0
  reference_probability: 0
  quote_recall_probability: 0
rapid_fire:
  enabled: false
arc:
  background_id: general
  questions:
    - id: q1
      question: What is your climate plan?
    - id: q2
      question: How will you create jobs?
responses:
  - text: We will invest heavily in wind and solar power across every region of the country.
    tone: confident
  - text: Jobs will come from the green transition and from apprenticeships in every town.
    tone: diplomatic
  - text: This turn comes after the interview is over.
    tone: diplomatic
"""


def _write(tmp_path):
    path = tmp_path / "script.yaml"
    path.write_text(SCRIPT, encoding="utf-8")
    return path


def test_replay_stops_at_conclusion(tmp_path):
    script = ReplayScript.model_validate(load_yaml_file(str(_write(tmp_path))))
    rows = replay(script)
    assert [(r["question_id"], r["action"]) for r in rows] == [("q1", "question"), ("q2", "conclusion")]
    assert rows[1]["content"] == CONCLUSION_MESSAGES["neutral"]


def test_cli_json_output(tmp_path, capsys):
    assert main([str(_write(tmp_path)), "--json"]) == 0
    lines = [json.loads(line) for line in capsys.readouterr().out.splitlines() if line.startswith("{")]
    assert [line["turn"] for line in lines] == [1, 2]
    assert lines[0]["content"] == "How will you create jobs?"


def test_cli_text_output(tmp_path, capsys):
    main([str(_write(tmp_path))])
    out = capsys.readouterr().out
    assert "[1] q1 confident -> question: How will you create jobs?" in out


def test_same_seed_replays_identically(tmp_path):
    path = _write(tmp_path)
    script = ReplayScript.model_validate(load_yaml_file(str(path)))
    assert replay(script, seed=11) == replay(script, seed=11)
