"""Chat message construction for analyze and debug requests."""

from typing import Any, Dict, List, Sequence

from modules.solver.encoding import to_data_uri

ANALYZE_INSTRUCTION = """\
You are an expert coding interview assistant. Analyze this coding problem screenshot and provide:
1. Problem Statement: Extract and summarize the problem.
2. Solution: Provide an optimal solution in {language}.
3. Explanation: Explain your approach and the reasoning behind it.
4. Time & Space Complexity: Analyze the complexity.

Format your response as JSON with these keys: problem_statement, code, thoughts (array), time_complexity, space_complexity."""

DEBUG_SYSTEM_PROMPT = (
    "You are a coding interview assistant helping debug code. Review both the "
    "problem and the user's solution, identify issues, and provide an improved solution."
)

DEBUG_PROBLEM_INTRO = "Here is the original problem:"

DEBUG_ATTEMPT_INTRO = "Here is my attempted solution/code:"

DEBUG_INSTRUCTION = """\
Analyze my solution, find any bugs or issues, and provide an improved solution in {language}. Format your response as JSON with these keys:
- new_code: The improved solution code
- thoughts: An array of string comments about what was wrong and how it was fixed
- time_complexity: The time complexity analysis
- space_complexity: The space complexity analysis"""


def text_part(text: str) -> Dict[str, Any]:
    return {"type": "text", "text": text}


def image_part(encoded: str) -> Dict[str, Any]:
    return {"type": "image_url", "image_url": {"url": to_data_uri(encoded)}}


def build_analyze_messages(encoded_image: str, language: str) -> List[Dict[str, Any]]:
    """Single user turn: instruction text followed by the screenshot."""
    return [
        {
            "role": "user",
            "content": [
                text_part(ANALYZE_INSTRUCTION.format(language=language)),
                image_part(encoded_image),
            ],
        }
    ]


def build_debug_messages(
    encoded_images: Sequence[str],
    language: str
) -> List[Dict[str, Any]]:
    """System turn plus one user turn interleaving text and screenshots.

    The first image is presented as the problem, every later image as the
    attempted solution, in the order given.

    Args:
        encoded_images: Base64 images, problem first and newest attempt last
        language: Programming language for the revised code

    Returns:
        Chat messages list
    """
    content = [text_part(DEBUG_PROBLEM_INTRO), image_part(encoded_images[0])]
    content.append(text_part(DEBUG_ATTEMPT_INTRO))
    content.extend(image_part(encoded) for encoded in encoded_images[1:])
    content.append(text_part(DEBUG_INSTRUCTION.format(language=language)))

    return [
        {"role": "system", "content": DEBUG_SYSTEM_PROMPT},
        {"role": "user", "content": content},
    ]
