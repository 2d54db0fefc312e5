import logging

import google.generativeai as genai

from mathprep.core.exceptions import GeneratorError

logger = logging.getLogger(__name__)


class GeminiClient:
    """Thin wrapper over google-generativeai returning the reply text."""

    def __init__(self, api_key: str, model_name: str = "gemini-1.5-flash", temperature: float = 0.2):
        genai.configure(api_key=api_key)
        self.model_name = model_name
        self.model = genai.GenerativeModel(model_name)
        self.generation_config = genai.GenerationConfig(
            temperature=temperature,
            top_p=0.9,
            top_k=40,
            max_output_tokens=4096,
        )

    def get_response(self, prompt: str) -> str:
        logger.info("Calling %s (%d prompt chars)", self.model_name, len(prompt))
        try:
            response = self.model.generate_content(prompt, generation_config=self.generation_config)
            text = response.text
        except Exception as e:
            logger.error("Gemini call failed: %s", e)
            raise GeneratorError("Gemini API call failed", details=str(e)) from e

        if not text or not text.strip():
            raise GeneratorError("Empty response from Gemini")
        return text
