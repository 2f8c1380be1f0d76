"""Write the FastAPI OpenAPI schema to openapi.json."""

import json
from pathlib import Path

from app.main import app


def main(output: Path = Path("openapi.json")) -> None:
    schema = app.openapi()
    output.write_text(json.dumps(schema, indent=2, ensure_ascii=False) + "\n")
    print(f"Generated {output} ({len(schema['paths'])} paths)")


if __name__ == "__main__":
    main()
