"""
Turn a text corpus into next-token prediction batches and print a summary
"""
import argparse
import os
import time

# Fix tokenizer parallelism warning when using DataLoader workers
os.environ["TOKENIZERS_PARALLELISM"] = "false"

from configs.dataset_config import DataConfig
from configs.sampler_config import SamplerConfig
from data.loader import prepare_dataloader, prepare_train_val_dataloaders
from utils.logger import setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Slide a window over a tokenized corpus and batch (input, target) pairs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Overlapping windows over a local file
  python run_sampler.py --text-file the-verdict.txt --max-length 4 --stride 1 --batch-size 8

  # Non-overlapping windows over a HF dataset
  python run_sampler.py --dataset-path wikitext --dataset-name wikitext-2-raw-v1 \\
      --max-length 256 --stride 256 --num-samples 500
        """
    )

    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument('--text-file', '-f', help='Local UTF-8 text file used as a single document')
    source.add_argument('--dataset-path', '-d', help='Hugging Face dataset path')

    parser.add_argument('--dataset-name', default=None, help='Dataset configuration name')
    parser.add_argument('--split', default='train', help='Dataset split (default: train)')
    parser.add_argument('--num-samples', type=int, default=None, help='Limit number of documents')
    parser.add_argument('--streaming', action='store_true', help='Stream the HF dataset')
    parser.add_argument('--tokenizer', '-t', default='gpt2', help='Tokenizer name (default: gpt2)')

    parser.add_argument('--max-length', type=int, default=256, help='Window width in tokens (default: 256)')
    parser.add_argument('--stride', type=int, default=128, help='Offset step between windows (default: 128)')
    parser.add_argument('--batch-size', type=int, default=4, help='Pairs per batch (default: 4)')
    parser.add_argument('--shuffle', action='store_true', help='Shuffle pair order')
    parser.add_argument('--drop-last', action='store_true', help='Drop a short trailing batch')
    parser.add_argument('--seed', type=int, default=None, help='Seed for shuffling')
    parser.add_argument('--num-batches', '-n', type=int, default=1, help='Batches to print (default: 1)')
    parser.add_argument('--val-fraction', type=float, default=0.0,
                        help='Fraction of documents held out for validation (default: 0, no split)')

    parser.add_argument('--log-dir', default='./logs', help='Log directory (default: ./logs)')
    parser.add_argument('--no-log-file', action='store_true', help='Log to console only')
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    logger = setup_logging(log_dir=args.log_dir, log_to_file=not args.no_log_file)
    logger.info("Starting window sampling")

    data_cfg = DataConfig(
        text_path=args.text_file,
        dataset_path=args.dataset_path,
        dataset_name=args.dataset_name,
        split=args.split,
        num_samples=args.num_samples,
        streaming=args.streaming,
        tokenizer_name=args.tokenizer,
    )
    sampler_cfg = SamplerConfig(
        max_length=args.max_length,
        stride=args.stride,
        batch_size=args.batch_size,
        shuffle=args.shuffle,
        drop_last=args.drop_last,
        seed=args.seed,
    )
    logger.info(f"Sampler configuration: {vars(sampler_cfg)}")

    start = time.time()
    val_loader = None
    if args.val_fraction > 0:
        loader, val_loader, tokenizer = prepare_train_val_dataloaders(data_cfg, sampler_cfg, args.val_fraction)
    else:
        loader, tokenizer = prepare_dataloader(data_cfg, sampler_cfg)
    elapsed = time.time() - start

    print("\nSampling")
    print("-" * 70)
    print(f"Windows:  {len(loader.dataset):,}")
    print(f"Batches:  {len(loader):,}")
    if val_loader is not None:
        print(f"Val windows: {len(val_loader.dataset):,}, val batches: {len(val_loader):,}")
    print(f"Prepared in {elapsed:.2f} s")

    for batch_idx, (inputs, targets) in enumerate(loader):
        if batch_idx >= args.num_batches:
            break
        print(f"\nBatch {batch_idx}: inputs {tuple(inputs.shape)}, targets {tuple(targets.shape)}")
        print(f"  inputs[0]:  {inputs[0].tolist()}")
        print(f"  targets[0]: {targets[0].tolist()}")
        print(f"  text[0]:    {tokenizer.decode(inputs[0].tolist())!r}")

    logger.info("Sampling complete")
    return loader


if __name__ == "__main__":
    main()
