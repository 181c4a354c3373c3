"""Handles text translation using Hugging Face models."""

import logging
import torch
from abc import ABC, abstractmethod
from transformers import AutoTokenizer, AutoModelForSeq2SeqLM
from typing import Dict, Optional, Tuple

from .exceptions import TranslationError
from .utils import shorten

logger = logging.getLogger(__name__)

DEFAULT_MODEL_TEMPLATE = "Helsinki-NLP/opus-mt-{source}-{target}"

class Translator(ABC):
    """Abstract base class for translation services."""

    @abstractmethod
    def translate(self, text: str, source_lang: str = "en", target_lang: str = "tr") -> str:
        """
        Translates text from source to target language.

        Args:
            text: The text to translate.
            source_lang: Source language code (e.g., 'en').
            target_lang: Target language code (e.g., 'tr').

        Returns:
            The translated text.

        Raises:
            TranslationError: If translation fails.
        """
        pass

class HuggingFaceTranslator(Translator):
    """
    Implements translation using Hugging Face MarianMT models.

    A song can be shown in any of several target languages during one session,
    so one tokenizer/model pair is loaded per language pair on first use and
    kept for the lifetime of the translator.
    """

    def __init__(
        self,
        model_template: str = DEFAULT_MODEL_TEMPLATE,
        source_lang: str = "en",
        device: str = "cpu",
        model_overrides: Optional[Dict[str, str]] = None,
        max_length: int = 512,
    ):
        """
        Initializes the HuggingFaceTranslator.

        Args:
            model_template: Model name pattern with {source} and {target} placeholders.
            source_lang: Language code lyrics are assumed to be written in.
            device: The device to run the models on ("cuda" or "cpu").
            model_overrides: Target code -> model name, for pairs whose model
                             does not follow the template.
            max_length: Token limit for a single line.

        Raises:
            ValueError: If the specified device is invalid.
        """
        self.model_template = model_template
        self.source_lang = source_lang
        self.device = device
        self.model_overrides = dict(model_overrides or {})
        self.max_length = max_length
        self._models: Dict[str, Tuple[object, object]] = {}
        self._failed: Dict[str, TranslationError] = {}

        if self.device == "cuda" and not torch.cuda.is_available():
            logger.warning("CUDA device requested but not available for translation. Falling back to CPU.")
            self.device = "cpu"
        elif self.device not in ["cuda", "cpu"]:
            raise ValueError(f"Invalid device specified: {self.device}. Choose 'cuda' or 'cpu'.")

        logger.info(f"Initialized HuggingFaceTranslator (source '{self.source_lang}', device '{self.device}').")

    def model_name_for(self, source_lang: str, target_lang: str) -> str:
        if target_lang in self.model_overrides:
            return self.model_overrides[target_lang]
        return self.model_template.format(source=source_lang, target=target_lang)

    def _load(self, model_name: str) -> Tuple[object, object]:
        """Returns the (tokenizer, model) pair for model_name, loading it if needed."""
        if model_name in self._models:
            return self._models[model_name]
        if model_name in self._failed:
            # Known to be missing or broken; do not hit the Hub again
            raise TranslationError(str(self._failed[model_name]))

        logger.info(f"Loading translation model '{model_name}' on device '{self.device}'")
        try:
            tokenizer = AutoTokenizer.from_pretrained(model_name)
            model = AutoModelForSeq2SeqLM.from_pretrained(model_name)
            model.to(self.device)
            model.eval()
        except Exception as e:
            logger.error(f"Failed to load translation model or tokenizer '{model_name}': {e}", exc_info=True)
            error = TranslationError(f"Failed to load translation model/tokenizer '{model_name}': {e}")
            self._failed[model_name] = error
            raise error from e

        self._models[model_name] = (tokenizer, model)
        logger.info(f"Translation model '{model_name}' loaded successfully.")
        return tokenizer, model

    def translate(self, text: str, source_lang: Optional[str] = None, target_lang: str = "tr") -> str:
        """
        Translates a single lyric line.

        Args:
            text: The text to translate.
            source_lang: Source language code; defaults to the translator's source.
            target_lang: Target language code.

        Returns:
            The translated text. Text already in the target language is returned as is.

        Raises:
            TranslationError: If the model cannot be loaded or generation fails.
        """
        if not text:
            return ""
        source_lang = source_lang or self.source_lang
        if source_lang == target_lang:
            return text

        tokenizer, model = self._load(self.model_name_for(source_lang, target_lang))

        logger.debug(f"Translating ({source_lang}->{target_lang}): '{shorten(text)}'")
        try:
            inputs = tokenizer(text, return_tensors="pt", padding=True, truncation=True, max_length=self.max_length)
            inputs = {k: v.to(self.device) for k, v in inputs.items()}

            with torch.no_grad():
                translated_tokens = model.generate(**inputs)

            translated_text = tokenizer.decode(translated_tokens[0], skip_special_tokens=True)
        except Exception as e:
            logger.error(f"Error during translation of text '{shorten(text)}': {e}", exc_info=True)
            raise TranslationError(f"Hugging Face translation failed: {e}") from e

        logger.debug(f"Translation result: '{shorten(translated_text)}'")
        return translated_text
