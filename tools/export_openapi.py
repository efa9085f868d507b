import json
import sys

from recipeshare.config import Settings
from recipeshare.main import create_app

def main(out: str = "openapi.json"):
    app = create_app(Settings(seed_demo_data=False))
    with open(out, "w", encoding="utf-8") as f:
        json.dump(app.openapi(), f, ensure_ascii=False, indent=2)
    print(f"✅ {out} escrito ({len(app.openapi()['paths'])} rutas)")

if __name__ == "__main__":
    main(*sys.argv[1:2])
