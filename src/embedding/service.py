"""
Sentence embedding backend for the embedding sentiment tier.

Provides:
- TextEmbedder protocol: "given a batch of strings, return one dense vector
  per string"
- EmbeddingBatch: the tensor produced for one call, released on exit from a
  ``with`` block
- TransformerEmbedder: HuggingFace encoder with attention-masked mean pooling
- load_embedder(): async loader used by the model lifecycle manager

Loading and inference block, so both run in a worker thread via
``asyncio.to_thread``; the event loop only ever sees awaitables.
"""

import asyncio
from collections.abc import Sequence
from types import TracebackType
from typing import Any, Protocol

import numpy as np
import structlog
import torch
from transformers import AutoModel, AutoTokenizer

from src.embedding.config import EmbeddingConfig

logger = structlog.get_logger(__name__)


class EmbeddingBatch:
    """
    Dense vectors for one ``embed()`` call.

    Owns the underlying tensor until ``dispose()`` (or the end of a ``with``
    block). Reading after disposal raises ``RuntimeError``.
    """

    def __init__(self, data: Any):
        self._tensor: torch.Tensor | None = torch.as_tensor(data)

    def __enter__(self) -> "EmbeddingBatch":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.dispose()

    @property
    def disposed(self) -> bool:
        return self._tensor is None

    def __len__(self) -> int:
        if self._tensor is None:
            return 0
        return int(self._tensor.shape[0])

    def array(self) -> np.ndarray:
        """Return the vectors as a float64 array of shape (batch, dim)."""
        if self._tensor is None:
            raise RuntimeError("Embedding batch already disposed")
        values = self._tensor.detach().float().cpu().numpy()
        return np.array(values, dtype=np.float64, copy=True)

    def dispose(self) -> None:
        """Release the tensor. Safe to call more than once."""
        self._tensor = None


class TextEmbedder(Protocol):
    async def embed(self, texts: Sequence[str]) -> EmbeddingBatch:  # pragma: no cover - interface
        ...

    def dispose(self) -> None:  # pragma: no cover - interface
        ...


def detect_device(preference: str = "auto") -> torch.device:
    """Pick the inference device: explicit preference, else CUDA > MPS > CPU."""
    if preference != "auto":
        return torch.device(preference)

    if torch.cuda.is_available():
        logger.info("Using CUDA device for embeddings")
        return torch.device("cuda")
    if torch.backends.mps.is_available():
        logger.info("Using MPS device for embeddings")
        return torch.device("mps")

    logger.info("Using CPU for embeddings")
    return torch.device("cpu")


class TransformerEmbedder:
    """
    Sentence embedder built on a HuggingFace encoder.

    Usage:
        embedder = await load_embedder()
        with await embedder.embed(["I love this"]) as batch:
            vector = batch.array()[0]
        embedder.dispose()
    """

    def __init__(
        self,
        model: Any,
        tokenizer: Any,
        device: torch.device,
        config: EmbeddingConfig | None = None,
    ):
        self._config = config or EmbeddingConfig()
        self._model = model
        self._tokenizer = tokenizer
        self._device = device

    @classmethod
    def from_pretrained(cls, config: EmbeddingConfig | None = None) -> "TransformerEmbedder":
        """Load tokenizer and model synchronously (call from a worker thread)."""
        config = config or EmbeddingConfig()
        device = detect_device(config.device)

        logger.info("Loading embedding model", model=config.model_name)

        tokenizer = AutoTokenizer.from_pretrained(
            config.model_name,
            model_max_length=config.max_sequence_length,
        )
        model = AutoModel.from_pretrained(config.model_name)
        model.to(device)
        model.eval()

        fp16 = config.use_fp16 and device.type == "cuda"
        if fp16:
            model = model.half()

        logger.info(
            "Embedding model loaded",
            model=config.model_name,
            device=str(device),
            fp16=fp16,
        )
        return cls(model, tokenizer, device, config)

    @property
    def device(self) -> torch.device:
        return self._device

    @property
    def is_disposed(self) -> bool:
        return self._model is None

    def _encode(self, model: Any, tokenizer: Any, texts: list[str]) -> torch.Tensor:
        """Tokenize, run the encoder and mean-pool over non-padding tokens."""
        inputs = tokenizer(
            texts,
            return_tensors="pt",
            truncation=True,
            max_length=self._config.max_sequence_length,
            padding=True,
        )
        inputs = {k: v.to(self._device) for k, v in inputs.items()}

        with torch.no_grad():
            outputs = model(**inputs)

            # outputs.last_hidden_state shape: [batch, seq_len, hidden_dim]
            token_embeddings = outputs.last_hidden_state
            mask = inputs["attention_mask"].unsqueeze(-1).expand(token_embeddings.size()).float()
            summed = torch.sum(token_embeddings * mask, dim=1)
            counts = torch.clamp(mask.sum(dim=1), min=1e-9)
            pooled = summed / counts

            if self._config.normalize_embeddings:
                pooled = torch.nn.functional.normalize(pooled, p=2, dim=1)

        return pooled.cpu()

    async def embed(self, texts: Sequence[str]) -> EmbeddingBatch:
        """
        Embed a batch of strings.

        Raises:
            TypeError: if ``texts`` is a bare string or not a sequence
            RuntimeError: if the embedder has been disposed
        """
        if isinstance(texts, (str, bytes)) or not isinstance(texts, Sequence):
            raise TypeError("texts must be a sequence of strings")

        # Borrow references so a concurrent dispose() cannot pull them mid-call
        model, tokenizer = self._model, self._tokenizer
        if model is None or tokenizer is None:
            raise RuntimeError("Embedder has been disposed")

        tensor = await asyncio.to_thread(self._encode, model, tokenizer, list(texts))
        return EmbeddingBatch(tensor)

    def dispose(self) -> None:
        """Drop model weights and tokenizer. Idempotent."""
        if self._model is None:
            return
        self._model = None
        self._tokenizer = None
        if self._device.type == "cuda":
            torch.cuda.empty_cache()
        logger.info("Embedding model disposed", model=self._config.model_name)


async def load_embedder(config: EmbeddingConfig | None = None) -> TransformerEmbedder:
    """Load a TransformerEmbedder without blocking the event loop."""
    return await asyncio.to_thread(TransformerEmbedder.from_pretrained, config)
