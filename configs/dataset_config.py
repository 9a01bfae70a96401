from dataclasses import dataclass
from typing import Optional
import logging

logger = logging.getLogger(__name__)

@dataclass
class DataConfig:
    # Corpus source: a local text file OR a HF dataset path, exactly one of them
    text_path: Optional[str] = None  # e.g., "the-verdict.txt"
    dataset_path: Optional[str] = None  # e.g., "wikitext" or "HuggingFaceTB/smollm-corpus"
    dataset_name: Optional[str] = None  # e.g., "wikitext-2-raw-v1"
    split: str = "train"

    # Tokenizer
    tokenizer_name: str = "gpt2"
    use_fast: bool = True
    trust_remote_code: bool = False

    # Limits
    num_samples: Optional[int] = None  # Limit number of documents

    # Columns and document joining
    text_column: str = "text"
    separate_documents: bool = True  # insert EOS between documents

    # Caching
    cache_dir: Optional[str] = "./hf_cache"

    # Streaming
    streaming: bool = False

    def __post_init__(self) -> None:
        # Validate corpus source
        if self.text_path and self.dataset_path:
            raise ValueError("Set only one of text_path and dataset_path")
        if not self.text_path and not self.dataset_path:
            raise ValueError("One of text_path or dataset_path must be set")
        for name in ("text_path", "dataset_path"):
            value = getattr(self, name)
            if value is not None:
                if not isinstance(value, str):
                    raise TypeError(f"{name} must be a string, got {type(value).__name__}")
                if value and not value.strip():
                    raise ValueError(f"{name} cannot be whitespace")

        # Validate tokenizer_name
        if not self.tokenizer_name or not isinstance(self.tokenizer_name, str):
            raise ValueError("tokenizer_name must be a non-empty string")
        if not self.tokenizer_name.strip():
            raise ValueError("tokenizer_name cannot be empty or whitespace")

        # Validate split
        if not self.split or not isinstance(self.split, str):
            raise ValueError("split must be a non-empty string")
        if not self.split.strip():
            raise ValueError("split cannot be empty or whitespace")

        # Validate num_samples
        if self.num_samples is not None:
            if not isinstance(self.num_samples, int):
                raise TypeError(f"num_samples must be an integer, got {type(self.num_samples).__name__}")
            if self.num_samples <= 0:
                raise ValueError(f"num_samples must be positive, got {self.num_samples}")

        # Validate text_column
        if not self.text_column or not isinstance(self.text_column, str):
            raise ValueError("text_column must be a non-empty string")
        if not self.text_column.strip():
            raise ValueError("text_column cannot be empty or whitespace")

        if self.text_path and self.streaming:
            logger.warning("streaming only applies to HF datasets and is ignored for text_path.")
