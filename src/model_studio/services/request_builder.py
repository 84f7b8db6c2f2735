"""Builds the instruction text and ordered part list sent to the model."""

from ..exceptions import MissingProductError
from ..models.generation import DEFAULT_MODEL, GenerationRequest, RequestDraft
from ..models.parts import ImagePart, TextPart

DEFAULT_PROMPT = "A confident-looking model in a brightly lit studio setting."

INSTRUCTION_TEMPLATE = """Generate a photorealistic, high-resolution e-commerce model photograph in a {aspect_ratio} aspect ratio.
- **INSTRUCTIONS:**
- The model must be wearing the exact clothing item from the product image.
- Generate a complete, new model wearing the product.
- The final image must look like a real photograph for a fashion website.
- The background should be a clean, minimalist studio setting that complements the product."""

POSE_INSTRUCTION = (
    "- The generated model MUST perfectly replicate the shooting angle, camera perspective, "
    "pose, body angle, and orientation from the pose reference image."
)

CONTEXT_TEMPLATE = "- **CONTEXT:** {prompt}"


def resolve_prompt(user_prompt: str | None) -> str:
    """Use the default prompt only when none was typed; whitespace is kept as is."""
    if not user_prompt:
        return DEFAULT_PROMPT
    return user_prompt


def build_instruction(aspect_ratio: str, user_prompt: str | None, with_pose: bool) -> str:
    lines = [INSTRUCTION_TEMPLATE.format(aspect_ratio=aspect_ratio)]
    if with_pose:
        lines.append(POSE_INSTRUCTION)
    lines.append(CONTEXT_TEMPLATE.format(prompt=resolve_prompt(user_prompt)))
    return "\n".join(lines)


def build_generation_request(
    product: ImagePart,
    pose: ImagePart | None,
    user_prompt: str | None,
    aspect_ratio: str,
    model: str = DEFAULT_MODEL,
) -> GenerationRequest:
    """
    Assemble the request for one generation.

    Parts come out as [instruction, product, pose?]; the pose sentence is
    part of the instruction exactly when a pose image is given.
    """
    instruction = build_instruction(aspect_ratio, user_prompt, with_pose=pose is not None)

    parts = [TextPart(text=instruction), product]
    if pose is not None:
        parts.append(pose)

    return GenerationRequest(model=model, parts=parts, aspect_ratio=aspect_ratio)


def build_from_draft(draft: RequestDraft, model: str = DEFAULT_MODEL) -> GenerationRequest:
    """Build a request from the user's current selections."""
    if draft.product is None:
        raise MissingProductError()

    return build_generation_request(
        product=draft.product.to_part(),
        pose=draft.pose.to_part() if draft.pose else None,
        user_prompt=draft.user_prompt,
        aspect_ratio=draft.aspect_ratio,
        model=model,
    )
