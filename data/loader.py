from __future__ import annotations

import random
from dataclasses import replace
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import torch
from datasets import load_dataset, IterableDataset
from torch.utils.data import DataLoader
from tqdm import tqdm
from transformers import AutoTokenizer, PreTrainedTokenizer

from configs.dataset_config import DataConfig
from configs.sampler_config import SamplerConfig
from data.dataset import TokenWindowDataset
from utils.helpers import make_generator, make_rng
import logging

logger = logging.getLogger(__name__)


def setup_tokenizer(config: DataConfig) -> PreTrainedTokenizer:
    logger.info(f"Loading tokenizer: {config.tokenizer_name}")
    tokenizer = AutoTokenizer.from_pretrained(
        config.tokenizer_name,
        use_fast=config.use_fast,
        trust_remote_code=config.trust_remote_code,
        cache_dir=config.cache_dir,
    )

    if tokenizer.pad_token is None:
        tokenizer.pad_token = tokenizer.eos_token
        logger.info(f"Set pad_token to eos_token: {tokenizer.pad_token}")

    return tokenizer


def load_corpus(config: DataConfig) -> List[str]:
    """Return the corpus as a list of documents."""
    if config.text_path:
        path = Path(config.text_path)
        logger.info(f"Reading text file {path}")
        text = path.read_text(encoding="utf-8")
        logger.info(f"Loaded {len(text):,} characters")
        return [text]

    streaming_mode = "streaming" if config.streaming else "regular"
    logger.info(f"Loading dataset '{config.dataset_path}' with name '{config.dataset_name}' ({streaming_mode} mode)")
    dataset = load_dataset(
        config.dataset_path,
        config.dataset_name,
        split=config.split,
        cache_dir=config.cache_dir,
        streaming=config.streaming,
    )

    # streaming datasets may not know their columns before the first row
    if dataset.column_names is not None and config.text_column not in dataset.column_names:
        raise ValueError(
            f"Text column '{config.text_column}' not found in dataset. "
            f"Available columns: {dataset.column_names}"
        )

    if config.num_samples:
        if isinstance(dataset, IterableDataset):
            logger.info(f"Taking first {config.num_samples} samples from stream")
            dataset = dataset.take(config.num_samples)
        else:
            actual_num_samples = min(config.num_samples, len(dataset))
            if actual_num_samples < config.num_samples:
                logger.warning(
                    f"Requested {config.num_samples} samples, but only {actual_num_samples} "
                    f"are available in the split '{config.split}'."
                )
            dataset = dataset.select(range(actual_num_samples))

    texts = []
    for row in dataset:
        # streaming datasets without declared features are only checked here
        if config.text_column not in row:
            raise ValueError(
                f"Text column '{config.text_column}' not found in dataset. "
                f"Available columns: {list(row.keys())}"
            )
        # skip blank rows (wikitext has many)
        if row[config.text_column]:
            texts.append(row[config.text_column])
    logger.info(f"Loaded {len(texts):,} documents")
    return texts


def tokenize_corpus(
    texts: Sequence[str],
    tokenizer: PreTrainedTokenizer,
    separate_documents: bool = True,
) -> List[int]:
    """
    Encode every document and concatenate the token IDs into one stream.

    When separate_documents is set and the tokenizer has an EOS token, its ID
    is placed between consecutive documents so windows can see the boundary.
    """
    eos_id = getattr(tokenizer, "eos_token_id", None) if separate_documents else None
    if separate_documents and eos_id is None:
        logger.warning("Tokenizer has no eos_token_id; documents will be joined without a separator.")

    token_ids: List[int] = []
    for i, text in enumerate(tqdm(texts, desc="Tokenizing", disable=len(texts) < 2)):
        if i > 0 and eos_id is not None:
            token_ids.append(eos_id)
        token_ids.extend(tokenizer.encode(text))

    logger.info(f"Tokenized {len(texts):,} documents into {len(token_ids):,} tokens")
    return token_ids


def split_documents(
    texts: Sequence[str],
    val_fraction: float = 0.1,
    rng: Optional[random.Random] = None,
) -> Tuple[List[str], List[str]]:
    """Split documents BEFORE tokenization so no window straddles train and val."""
    if not 0.0 <= val_fraction < 1.0:
        raise ValueError(f"val_fraction must be in [0, 1), got {val_fraction}")

    docs = list(texts)
    if rng is not None:
        rng.shuffle(docs)
    num_val = int(len(docs) * val_fraction)
    num_train = len(docs) - num_val
    logger.info(f"Split into {num_train:,} train docs and {num_val:,} val docs")
    return docs[:num_train], docs[num_train:]


def create_dataloader(
    tokens: Sequence[int],
    config: SamplerConfig,
    generator: Optional[torch.Generator] = None,
) -> DataLoader:
    dataset = TokenWindowDataset(tokens, max_length=config.max_length, stride=config.stride)
    logger.info(
        f"Sampling {len(dataset):,} windows of length {config.max_length} "
        f"with stride {config.stride} from {len(tokens):,} tokens"
    )
    if len(dataset) == 0:
        logger.warning(
            f"Only {len(tokens)} tokens but max_length is {config.max_length}; "
            f"need at least {config.max_length + 1} for one sample. The dataset is empty!"
        )

    if config.shuffle and generator is None:
        generator = make_generator(config.seed)

    return DataLoader(
        dataset,
        batch_size=config.batch_size,
        shuffle=config.shuffle,
        drop_last=config.drop_last,
        num_workers=config.num_workers,
        generator=generator,
    )


def create_dataloader_from_text(
    text: str,
    tokenizer: PreTrainedTokenizer,
    config: SamplerConfig,
    generator: Optional[torch.Generator] = None,
) -> DataLoader:
    token_ids = tokenizer.encode(text)
    return create_dataloader(token_ids, config, generator=generator)


def prepare_dataloader(
    data_config: DataConfig,
    sampler_config: SamplerConfig,
    generator: Optional[torch.Generator] = None,
) -> Tuple[DataLoader, PreTrainedTokenizer]:

    tokenizer = setup_tokenizer(data_config)
    texts = load_corpus(data_config)
    tokens = tokenize_corpus(texts, tokenizer, separate_documents=data_config.separate_documents)
    loader = create_dataloader(tokens, sampler_config, generator=generator)

    logger.info(f"DataLoader prepared: {len(loader):,} batches of size {sampler_config.batch_size}")
    logger.info(f"Vocabulary size: {tokenizer.vocab_size}")

    return loader, tokenizer


def prepare_train_val_dataloaders(
    data_config: DataConfig,
    sampler_config: SamplerConfig,
    val_fraction: float = 0.1,
) -> Tuple[DataLoader, DataLoader, PreTrainedTokenizer]:
    """
    Like `prepare_dataloader`, but holds out val_fraction of the documents.

    Documents are shuffled with a RNG seeded from sampler_config.seed before
    the split. The validation loader never shuffles.
    """
    tokenizer = setup_tokenizer(data_config)
    texts = load_corpus(data_config)
    train_texts, val_texts = split_documents(texts, val_fraction, rng=make_rng(sampler_config.seed))

    logger.info("Tokenizing train set...")
    train_tokens = tokenize_corpus(train_texts, tokenizer, separate_documents=data_config.separate_documents)
    logger.info("Tokenizing validation set...")
    val_tokens = tokenize_corpus(val_texts, tokenizer, separate_documents=data_config.separate_documents)

    train_loader = create_dataloader(train_tokens, sampler_config)
    val_loader = create_dataloader(val_tokens, replace(sampler_config, shuffle=False))

    logger.info(f"Train batches: {len(train_loader):,}, Val batches: {len(val_loader):,}")
    return train_loader, val_loader, tokenizer
