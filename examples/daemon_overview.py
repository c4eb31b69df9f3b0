"""End-to-end walk through the client API against a local daemon."""

from __future__ import annotations

import os
import random
import string
from typing import Any
from urllib.parse import quote

from dockerd_client import ConflictError, DockerClient, NotFoundError

IMAGE = os.getenv("DOCKERD_DEMO_IMAGE", "alpine:3.19")


def log_section(title: str) -> None:
    print("\n" + "=" * 80)
    print(title)
    print("=" * 80)


def pretty_rows(rows: list[dict[str, Any]], *keys: str) -> None:
    if not rows:
        print("  (no data)")
        return
    for row in rows:
        print("  " + " | ".join(str(row.get(key)) for key in keys))


def main() -> None:
    log_section("dockerd client: daemon overview")
    with DockerClient.from_env(send_content_length=True) as client:
        show_daemon(client)


def show_daemon(client: DockerClient) -> None:
    print(client)

    log_section("Step 1: Ping")
    ping = client.head("/_ping")
    print(f"→ HEAD /_ping -> {ping.status_code()} {ping.reason}")
    for name in ("Api-Version", "Docker-Experimental", "Ostype"):
        if name in ping.headers:
            print(f"  {name}: {ping.headers[name]}")

    log_section("Step 2: List containers")
    filters = quote('{"status":["running"]}')
    result = client.get(f"/containers/json?all=1&filters={filters}").raise_for_status()
    pretty_rows(result.data, "Id", "Image", "State")

    log_section("Step 3: Create and remove a throwaway container")
    name = "dockerd-demo-" + "".join(random.choices(string.ascii_lowercase, k=6))
    created = client.post(
        f"/containers/create?name={name}",
        json={"Image": IMAGE, "Cmd": ["true"]},
    )
    try:
        created.raise_for_status()
    except NotFoundError:
        print(f"→ Image {IMAGE} is not present locally, skipping")
    except ConflictError as exc:
        print(f"→ {exc}")
    else:
        container_id = created.data["Id"]
        print(f"→ Created {container_id[:12]} ({name})")
        removed = client.delete(f"/containers/{container_id}?force=1")
        print(f"→ DELETE -> {removed.status_code()} {removed.reason}")

    log_section("Step 4: Unsafe request, safely")
    missing = client.request_safe("GET", "/containers/does-not-exist/json")
    if missing.ok and missing.data is not None:
        print(f"→ {missing.data.status_code()} {missing.data.data}")
    else:
        print(f"→ request failed: {missing.error}")


if __name__ == "__main__":
    main()
