import tempfile
from enum import Enum
from pathlib import Path
from typing import Callable

from assets.replace import replace_with_backup
from assets.selector import select_assets
from discovery.files import discover_project_files
from exceptions import CompressorUnavailableError
from optimizers.base import BaseCompressor
from optimizers.router import get_compressor
from schemas import (
    AssetFile,
    AssetResult,
    OptimizationOptions,
    OptimizationOutcome,
    OptimizationState,
    RunSummary,
)
from storage.state import StateStore, is_initialized
from utils.formatting import format_size
from utils.hashing import calculate_hash
from utils.logging import get_logger

logger = get_logger("assets.engine")

# project_root -> relative paths of every bundled file
Discover = Callable[[Path], list[str]]


class AssetState(str, Enum):
    """Non-terminal per-asset states. Terminal states are OptimizationOutcome."""

    DISCOVERED = "discovered"
    HASH_KNOWN = "hash_known"
    COMPRESSING = "compressing"
    COMPRESSED = "compressed"


class OptimizationEngine:
    """Incremental, content-addressed asset optimizer.

    One run:
    1. Load state (created empty on first use)
    2. Hash every image candidate; evict state entries no candidate backs
    3. Walk the working set (filtered selection if include/exclude given)
    4. Per asset: skip known hashes, otherwise compress and keep the
       result only if it is strictly smaller
    5. Commit state once

    Assets are processed strictly in order. ``self.state`` has a single
    writer; any parallel variant must serialize writes to it and still
    finish eviction before the first lookup.
    """

    def __init__(
        self,
        project_root: str | Path,
        store: StateStore | None = None,
        compressor: BaseCompressor | None = None,
        discover: Discover | None = None,
    ):
        self.project_root = Path(project_root)
        self.store = store or StateStore(self.project_root)
        self.compressor = compressor or get_compressor()
        self.discover = discover or discover_project_files
        self.state: OptimizationState = {}

    async def run(self, options: OptimizationOptions | None = None) -> RunSummary:
        """Optimize the project's image assets.

        If the compressor is missing, processing stops at the first asset
        that needs it; assets finalized before that point are still
        committed since their files on disk were already replaced.
        Any other error propagates without committing.
        """
        options = options or OptimizationOptions()
        logger.info("Optimizing assets...")

        self.state = self.store.load()
        summary = RunSummary(state_created=self.store.created)

        selection = select_assets(
            self.discover(self.project_root),
            include=options.include,
            exclude=options.exclude,
        )
        assets = {
            rel: AssetFile.from_relative(self.project_root, rel)
            for rel in selection.all_candidates
        }
        summary.evicted = self.evict_stale(list(assets.values()))

        for rel in selection.working_set(options.has_filters):
            try:
                result = await self.process_asset(assets[rel], options)
            except CompressorUnavailableError as e:
                logger.error(
                    f"{e.message}\nRun this command again after installing it with "
                    f"`{e.details.get('install_hint')}`",
                    extra={"context": {"asset": rel, **e.details}},
                )
                summary.results.append(
                    AssetResult(path=rel, outcome=OptimizationOutcome.UNAVAILABLE)
                )
                summary.aborted = True
                break
            summary.results.append(result)

        if not summary.aborted:
            self._log_summary(summary)

        self.store.commit(self.state)
        return summary

    def evict_stale(self, candidates: list[AssetFile]) -> int:
        """Drop state entries whose content no longer exists among candidates.

        Returns:
            Number of evicted entries.
        """
        outdated = set(self.state)
        for asset in candidates:
            outdated.discard(asset.hash)

        for content_hash in outdated:
            del self.state[content_hash]

        if outdated:
            logger.debug(
                f"Removed {len(outdated)} outdated entries from asset state",
                extra={"context": {"evicted": len(outdated)}},
            )
        return len(outdated)

    async def process_asset(
        self, asset: AssetFile, options: OptimizationOptions
    ) -> AssetResult:
        """Run one asset through the state machine.

        DISCOVERED -> HASH_KNOWN -> ALREADY_OPTIMIZED
                                 -> COMPRESSING -> COMPRESSED -> IMPROVED | NOT_IMPROVED
                                 -> (CompressorUnavailableError)

        Raises:
            CompressorUnavailableError: If the asset needs compressing and
                no backend is installed.
            OSError: If the asset cannot be read or moved.
        """
        self._transition(asset, AssetState.DISCOVERED)
        original_hash = asset.hash
        self._transition(asset, AssetState.HASH_KNOWN)

        if self.state.get(original_hash):
            return AssetResult(
                path=asset.relative_path,
                outcome=OptimizationOutcome.ALREADY_OPTIMIZED,
                original_hash=original_hash,
            )

        if not self.compressor.is_available():
            raise CompressorUnavailableError(
                f"Cannot optimize images without {self.compressor.name}.",
                compressor=self.compressor.name,
                install_hint=self.compressor.install_hint,
            )

        self._transition(asset, AssetState.COMPRESSING)
        logger.info(
            f"Checking {asset.relative_path}",
            extra={"context": {"asset": asset.relative_path}},
        )
        original_size = asset.size

        with tempfile.TemporaryDirectory(prefix="asset-optimize-") as tmp:
            optimized_path = await self.compressor.compress(
                asset.path, Path(tmp), options.quality
            )
            self._transition(asset, AssetState.COMPRESSED)
            optimized_size = optimized_path.stat().st_size

            result = AssetResult(
                path=asset.relative_path,
                outcome=OptimizationOutcome.NOT_IMPROVED,
                original_hash=original_hash,
                original_size=original_size,
                optimized_size=optimized_size,
                saved_bytes=original_size - optimized_size,
            )

            if result.saved_bytes > 0:
                return self._accept(asset, optimized_path, result, options.save)
            return self._reject(result)

    def _transition(self, asset: AssetFile, state: AssetState) -> None:
        logger.debug(
            f"{asset.relative_path}: {state.value}",
            extra={"context": {"asset": asset.relative_path, "state": state.value}},
        )

    def _reject(self, result: AssetResult) -> AssetResult:
        """Keep the original untouched and remember it needs no more work."""
        self.state[result.original_hash] = True

        if result.saved_bytes == 0:
            message = "Skipping: Original was identical in size."
        else:
            message = f"Skipping: Original was {format_size(-result.saved_bytes)} smaller."
        logger.info(message, extra={"context": {"asset": result.path}})
        return result

    def _accept(
        self,
        asset: AssetFile,
        optimized_path: Path,
        result: AssetResult,
        save: bool,
    ) -> AssetResult:
        """Swap the compressed file in and finalize the new content."""
        backup = replace_with_backup(asset.path, optimized_path)
        backup_rel = backup.relative_to(self.project_root).as_posix()
        try:
            new_hash = calculate_hash(asset.path)
        except OSError:
            # Backup stays on disk: the replace did not complete
            logger.error(
                f"Could not read {asset.relative_path} after replacing it; "
                f"original kept at {backup_rel}",
                extra={"context": {"asset": asset.relative_path, "backup": backup_rel}},
            )
            raise

        self.state[new_hash] = True
        result.optimized_hash = new_hash
        result.outcome = OptimizationOutcome.IMPROVED

        if save and new_hash != result.original_hash:
            # A reappearing original is recognized as already handled
            self.state[result.original_hash] = True
            result.backup_path = backup_rel
            logger.info(
                f"Saving original asset to {backup_rel}",
                extra={"context": {"asset": asset.relative_path}},
            )
        else:
            if save:
                logger.info(
                    f"Compressed asset {asset.relative_path} is identical to the original. "
                    "Using original instead.",
                    extra={"context": {"asset": asset.relative_path}},
                )
            backup.unlink(missing_ok=True)

        logger.info(
            f"Saved {format_size(result.saved_bytes)}",
            extra={
                "context": {
                    "asset": asset.relative_path,
                    "original_size": result.original_size,
                    "optimized_size": result.optimized_size,
                }
            },
        )
        return result

    def _log_summary(self, summary: RunSummary) -> None:
        context = {
            "files_checked": summary.files_checked,
            "files_skipped": summary.files_skipped,
            "total_saved": summary.total_saved,
            "evicted": summary.evicted,
        }
        if summary.total_saved == 0:
            logger.info("All assets were fully optimized already.", extra={"context": context})
        else:
            logger.info(
                f"Finished compressing assets. {format_size(summary.total_saved)} saved.",
                extra={"context": context},
            )


async def optimize_project(
    project_root: str | Path = "./",
    options: OptimizationOptions | None = None,
    **collaborators,
) -> RunSummary:
    """Run one optimization pass over ``project_root``.

    ``collaborators`` are forwarded to OptimizationEngine
    (store, compressor, discover).
    """
    engine = OptimizationEngine(project_root, **collaborators)
    return await engine.run(options)


async def is_project_optimized(
    project_root: str | Path,
    options: OptimizationOptions | None = None,
    discover: Discover | None = None,
) -> bool:
    """Whether every selected asset is already finalized.

    Read-only: never creates, evicts from, or writes the state file.
    """
    project_root = Path(project_root)
    if not is_initialized(project_root):
        return False

    options = options or OptimizationOptions()
    discover = discover or discover_project_files
    state = StateStore(project_root).read()

    selection = select_assets(
        discover(project_root), include=options.include, exclude=options.exclude
    )
    for rel in selection.selected_candidates:
        if not state.get(calculate_hash(project_root / rel)):
            return False
    return True
