import subprocess
from pathlib import Path

from .log import console, logger
from .utils import Utils

IMAGE_SUFFIXES = {".jpg", ".jpeg", ".png", ".webp"}


def count_images(directory: Path) -> int:
    return sum(1 for p in directory.rglob("*") if p.is_file() and p.suffix.lower() in IMAGE_SUFFIXES)


def download_command(tool: str, url: str, target: Path):
    if tool == "wget":
        return ["wget", "-q", "-O", str(target), url]
    return ["curl", "-s", "-f", "-L", "-o", str(target), url]


def download_and_extract_wallpapers(url: str, dest: Path, work_dir: Path, dry_run: bool = False) -> bool:
    """
    Fetch the wallpaper archive and unpack it into ``dest``.

    Wallpapers are optional: every failure is reported and False returned,
    nothing is raised.
    """
    logger.info(f"Downloading wallpapers from {url}")

    if dry_run:
        logger.info(f"(dry-run) Would create directory: {dest}")
        logger.info(f"(dry-run) Would download wallpapers.zip from: {url}")
        logger.info(f"(dry-run) Would extract to: {dest}")
        return True

    tool = Utils.which("wget", "curl")
    if tool is None:
        logger.warning("Neither wget nor curl found. Skipping wallpaper download.")
        return False
    if Utils.which("unzip") is None:
        logger.warning("unzip not found. Skipping wallpaper extraction.")
        return False

    try:
        dest.mkdir(parents=True, exist_ok=True)
        work_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.warning(f"Cannot create wallpaper directories: {e}")
        return False

    temp_zip = work_dir / "wallpapers.zip"
    logger.info(f"Using {tool} for downloads")
    try:
        res = Utils.run_command(download_command(tool, url, temp_zip), check=False)
        if res.returncode != 0:
            logger.error("Failed to download wallpapers.zip")
            return False
        if not temp_zip.exists() or temp_zip.stat().st_size == 0:
            logger.error("Downloaded file is empty")
            return False

        res = Utils.run_command(["unzip", "-q", "-o", str(temp_zip), "-d", str(dest)], check=False)
        if res.returncode != 0:
            logger.error("Failed to extract wallpapers.zip")
            return False
    except (OSError, subprocess.SubprocessError) as e:
        logger.error(f"Wallpaper download failed: {e}")
        return False
    finally:
        temp_zip.unlink(missing_ok=True)

    console.print(f"[green]Found {count_images(dest)} wallpaper file(s) in {dest}[/green]")
    return True
