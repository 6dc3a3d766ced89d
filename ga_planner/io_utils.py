"""
I/O utilities for the evolutionary planner.

Handles CSV serialization of action sequences, played-back action logs and
per-generation search history.
"""

import csv
from pathlib import Path
from typing import List, Sequence, Union
from datetime import datetime
import numpy as np

from sim_engine.forward_model import MarioActions

from .data_models import ActionSequence, GenerationRecord


ACTION_COLUMNS = [action.name.lower() for action in MarioActions]
HISTORY_COLUMNS = ["generation", "best_fitness", "mean_fitness", "worst_fitness",
                   "elite_indices", "timestamp"]


def _prepare_output(output_path: Union[str, Path], overwrite: bool) -> Path:
    output_path = Path(output_path)

    if output_path.exists() and not overwrite:
        raise FileExistsError(f"Output file already exists: {output_path}")

    # Create parent directory if needed
    output_path.parent.mkdir(parents=True, exist_ok=True)
    return output_path


def save_action_sequence_to_csv(
    sequence: ActionSequence,
    output_path: Union[str, Path],
    overwrite: bool = False
) -> Path:
    """
    Save an ActionSequence to CSV file.

    CSV format:
        tick,left,right,down,speed,jump
        0,0,1,0,1,0
        1,0,1,0,1,1
        ...

    Args:
        sequence: Sequence to save
        output_path: Path for output CSV
        overwrite: If True, overwrite existing file

    Returns:
        Path to saved CSV file

    Raises:
        FileExistsError: If file exists and overwrite=False
    """
    output_path = _prepare_output(output_path, overwrite)

    with open(output_path, 'w', newline='') as f:
        writer = csv.writer(f)
        writer.writerow(['tick'] + ACTION_COLUMNS[:sequence.num_actions])

        for tick, row in enumerate(sequence.actions):
            writer.writerow([tick] + [int(flag) for flag in row])

    sequence.metadata["saved_at"] = datetime.now().isoformat()
    sequence.metadata["path"] = str(output_path)

    return output_path


def save_actions_to_csv(
    actions: Sequence[Sequence[bool]],
    output_path: Union[str, Path],
    overwrite: bool = False
) -> Path:
    """
    Save a played-back action log (e.g. GameResult.actions) to CSV.

    Args:
        actions: One button vector per tick
        output_path: Path for output CSV
        overwrite: If True, overwrite existing file

    Returns:
        Path to saved CSV file
    """
    if len(actions) == 0:
        sequence = ActionSequence.empty(0, len(ACTION_COLUMNS))
    else:
        sequence = ActionSequence(actions=np.asarray(actions, dtype=bool))
    return save_action_sequence_to_csv(sequence, output_path, overwrite=overwrite)


def load_action_sequence_from_csv(csv_path: Union[str, Path]) -> ActionSequence:
    """
    Load an action sequence CSV written by save_action_sequence_to_csv.

    Args:
        csv_path: Path to CSV file

    Returns:
        ActionSequence with rows ordered by tick

    Raises:
        FileNotFoundError: If CSV file doesn't exist
        ValueError: If CSV format is invalid
    """
    csv_path = Path(csv_path)

    if not csv_path.exists():
        raise FileNotFoundError(f"CSV file not found: {csv_path}")

    rows = []
    with open(csv_path, 'r') as f:
        reader = csv.reader(f)
        header = next(reader, None)

        if not header or header[0] != 'tick' or header[1:] != ACTION_COLUMNS[:len(header) - 1]:
            raise ValueError(
                f"Invalid CSV format in {csv_path}. Expected columns: tick,{','.join(ACTION_COLUMNS)}"
            )
        width = len(header) - 1

        for line_number, row in enumerate(reader, start=2):
            if len(row) != width + 1:
                raise ValueError(f"Row {line_number} in {csv_path} has {len(row)} columns, expected {width + 1}")
            rows.append((int(row[0]), [bool(int(value)) for value in row[1:]]))

    rows.sort(key=lambda r: r[0])
    actions = np.array([flags for _, flags in rows], dtype=bool).reshape(len(rows), width)

    return ActionSequence(
        actions=actions,
        metadata={
            "loaded_at": datetime.now().isoformat(),
            "source_file": str(csv_path)
        }
    )


def save_search_history(
    records: List[GenerationRecord],
    output_path: Union[str, Path],
    append: bool = False
) -> Path:
    """
    Save per-generation search records to CSV.

    Args:
        records: Generation records to save
        output_path: Path for output CSV
        append: If True, append to existing file instead of overwriting

    Returns:
        Path to saved history CSV
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    file_exists = output_path.exists()
    mode = 'a' if append and file_exists else 'w'

    with open(output_path, mode, newline='') as f:
        writer = csv.DictWriter(f, fieldnames=HISTORY_COLUMNS)

        # Write header if creating new file
        if mode == 'w':
            writer.writeheader()

        for record in records:
            writer.writerow(record.to_dict())

    return output_path


def load_search_history(history_path: Union[str, Path]) -> List[GenerationRecord]:
    """
    Load search history from CSV.

    Args:
        history_path: Path to history CSV

    Returns:
        List of GenerationRecord objects

    Raises:
        FileNotFoundError: If history file doesn't exist
    """
    history_path = Path(history_path)

    if not history_path.exists():
        raise FileNotFoundError(f"History file not found: {history_path}")

    with open(history_path, 'r') as f:
        reader = csv.DictReader(f)
        return [GenerationRecord.from_dict(row) for row in reader]


def create_output_directory(root: Union[str, Path], overwrite: bool = False) -> Path:
    """
    Create the output directory for a run.

    Raises:
        FileExistsError: If the directory exists and overwrite=False
    """
    output_root = Path(root)

    if output_root.exists() and not overwrite:
        raise FileExistsError(
            f"Output directory already exists: {output_root}\n"
            f"Set 'output.overwrite: true' in config to overwrite"
        )

    output_root.mkdir(parents=True, exist_ok=overwrite)
    return output_root