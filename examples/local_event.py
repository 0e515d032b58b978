"""
local_event.py — Run a Periselene heat on one machine
=====================================================

Director, two pilots and a judge share one in-memory store and
broadcast channel, so the whole launch protocol runs in a single
process:

    python local_event.py

The script will:
  1. Register two pilots and open a BUILD launch
  2. Commit once both pilots answered the ready-check
  3. Move to FLIGHT, land both pilots and score them
  4. Announce the winner and wait for the reveal

Press Ctrl+C to stop early.
"""

import sys
import time

from periselene import (
    ConfigError,
    DirectorConsole,
    InMemoryBroadcastChannel,
    InMemoryStateStore,
    JudgeDesk,
    MissionPhase,
    ParticipantClient,
    log_error,
    setup_logging,
    validate_config,
)
from periselene.config import with_defaults

# ── Configuration ──
config = with_defaults({
    # Short windows so the demo finishes quickly
    "build_duration_seconds": 10,
    "alert_threshold_seconds": 5,
    "reveal_delay_ms": 3000,
    "log_file": "local_event.log",
})

setup_logging(log_file_path=config["log_file"])

try:
    validate_config(config, "director")
except ConfigError as e:
    log_error(e)
    sys.exit(1)

store = InMemoryStateStore()
channel = InMemoryBroadcastChannel()

director = DirectorConsole(store, channel, config)
director.bootstrap()

pilots = []
for name in ("Eagle", "Falcon"):
    participant = director.register_participant(name)
    client = ParticipantClient(store, channel, config, participant_id=participant.id)
    client.start()
    pilots.append(client)


def run_launch(phase):
    director.request_phase(phase)
    print(f"Ready-check {phase.value}: {director.ready_status()}")
    director.handle_sync_launch()
    while director.state.phase is not phase:
        view = director.tick()
        if view.countdown_seconds:
            print(f"  {view.countdown_label} in {view.countdown_seconds}")
        time.sleep(0.5)
    for client in pilots:
        client.poll()


run_launch(MissionPhase.BUILD)
time.sleep(2)
run_launch(MissionPhase.FLIGHT)

# ── Fly, land and score ──
for client in pilots:
    time.sleep(3)
    client.land()

judge = JudgeDesk(store, config)
judge.update_scoring(pilots[0].participant_id, used_budget=42000, landing_grade="hard")
judge.update_scoring(pilots[1].participant_id, rover_bonus_granted=True, landing_grade="soft")

for entry in judge.leaderboard():
    print(f"#{entry.rank} {entry.participant.display_name}: {entry.breakdown.final_score_label}")

# ── Winner reveal ──
director.announce_winner()
for client in pilots:
    client.poll()
while True:
    reveal = pilots[0].tick().reveal
    if reveal.winner is not None:
        print(f"Winner: {reveal.winner['display_name']} ({reveal.winner['final_score_label']})")
        break
    print(f"  Locking results... {reveal.seconds_remaining}")
    time.sleep(1)

director.close()
for client in pilots:
    client.stop()
