# main.py
import argparse
import json

from route_sim.app.build import build
from route_sim.io.config import load_scenario


def run(path: str, *, use_logging: bool = True) -> dict:
    model = load_scenario(path)
    app = build(model, use_logging=use_logging)
    summary = app.run()
    return {"scenario": model.name, **app.sim.graph_info(), **summary}


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Run a routing scenario and report delivery stats.")
    parser.add_argument("scenario", help="YAML scenario file")
    parser.add_argument("--quiet", action="store_true", help="disable JSON run logs")
    args = parser.parse_args()
    print(json.dumps(run(args.scenario, use_logging=not args.quiet)))
