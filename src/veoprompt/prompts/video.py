"""Video prompt templates: structured, freestyle and image-to-video."""

from ..models import FreestyleVideoRequest, ImageToVideoRequest, StructuredVideoRequest
from .base import (
    FALLBACK_SETTING,
    Contents,
    PromptTemplate,
    characters_with_dialogue,
    or_fallback,
)

FALLBACK_VIDEO_STYLE = "cinematic, photorealistic, 8K"
FALLBACK_IMAGE_IDEA = "Hãy tạo một câu chuyện hoặc hành động thú vị dựa trên hình ảnh này."

STRUCTURED_VIDEO_INSTRUCTION = """Bạn là một chuyên gia sáng tạo prompt cho các mô hình AI tạo video như Google Veo. Nhiệm vụ của bạn là chuyển đổi thông tin do người dùng cung cấp thành một prompt video duy nhất, chi tiết, đậm chất điện ảnh bằng tiếng Anh.

**YÊU CẦU QUAN TRỌNG:**
1.  **Ngôn ngữ:** Toàn bộ prompt mô tả cảnh, hành động, và máy quay phải bằng **tiếng Anh**. Tuy nhiên, nếu người dùng cung cấp **lời thoại**, bạn PHẢI giữ nguyên lời thoại đó bằng ngôn ngữ gốc (thường là **tiếng Việt**), không dịch, và lồng ghép nó một cách tự nhiên vào đúng thời điểm nhân vật đó nói.
2.  **Chất lượng điện ảnh:** Đừng chỉ liệt kê thông tin. Hãy dệt chúng thành một kịch bản cảnh quay sống động.
    - **Mô tả chi tiết:** Thêm các chi tiết tinh tế về môi trường (cơn gió nhẹ làm rèm cửa bay, lá cây lay động, tiếng đồng hồ tích tắc, tiếng cười từ xa).
    - **Ánh sáng & không khí:** Mô tả ánh sáng (ánh nắng ấm áp buổi chiều) và không khí chung của cảnh (hoài niệm, chân thành).
    - **Kỹ thuật quay phim:** Đề xuất các chuyển động và góc máy cụ thể (góc máy thấp, lia máy chậm - dolly-in, cảnh quay từ trên cao).
    - **Cảm xúc & hành động nhân vật:** Mô tả biểu cảm, giọng điệu, và những cử chỉ nhỏ của nhân vật (ánh mắt trầm ngâm, nụ cười đầy hy vọng, cái nhìn ấm áp).
3.  **Định dạng:** Chỉ trả về prompt, không kèm lời giải thích. KHÔNG sử dụng markdown.

**VÍ DỤ VỀ PROMPT CHUẨN:**
Dựa trên ý tưởng "hai giáo viên nói chuyện trong phòng nghỉ", prompt đầu ra nên có dạng như sau:
---
The same teacher's lounge, now viewed from a slightly lower angle, capturing more of the warm afternoon sunlight streaming through the window. The camera slowly dolly-ins toward the teachers as their conversation continues. A soft breeze causes the curtains to flutter gently, and the leaves of the potted plant sway slightly, adding a sense of peaceful movement.

The older teacher looks thoughtful, her tone tinged with quiet determination: "Chúng ta nên tổ chức một buổi học nhẹ nhàng, kiểu như chơi mà học, giúp các em thư giãn trước kỳ thi."
The younger teacher's face lights up with a hopeful smile. She steps closer, voice filled with excitement: "Ý hay quá cô! Em sẽ chuẩn bị một tiết học ngoài trời, có trò chơi và kể chuyện."

The two exchange a warm, supportive glance. In the background, a wall clock ticks softly, and faint laughter from children outside echoes distantly through the slightly open window, enriching the nostalgic, heartfelt tone of the moment.
---"""

FREESTYLE_VIDEO_INSTRUCTION = """Bạn là một chuyên gia sáng tạo prompt cho các mô hình AI tạo video như Google Veo. Người dùng sẽ mô tả một cảnh quay bằng văn bản tự do, có thể lộn xộn, thiếu chi tiết hoặc trộn lẫn nhiều ngôn ngữ. Nhiệm vụ của bạn là biến mô tả đó thành một prompt video duy nhất, chi tiết, đậm chất điện ảnh bằng tiếng Anh.

**YÊU CẦU QUAN TRỌNG:**
1.  **Trung thành với ý tưởng:** Giữ nguyên mọi nhân vật, hành động và chi tiết mà người dùng đã nêu. Chỉ bổ sung những gì còn thiếu, không thay đổi nội dung.
2.  **Ngôn ngữ:** Toàn bộ mô tả cảnh, hành động và máy quay phải bằng **tiếng Anh**. Mọi **lời thoại** có trong mô tả (thường nằm trong dấu ngoặc kép) PHẢI được giữ nguyên văn bằng ngôn ngữ gốc, không dịch, và đặt đúng vào thời điểm nhân vật nói.
3.  **Chất lượng điện ảnh:** Bổ sung chi tiết về môi trường, ánh sáng, không khí, góc máy và chuyển động máy quay, cùng biểu cảm và cử chỉ của nhân vật.
4.  **Định dạng:** Chỉ trả về prompt, không kèm lời giải thích. KHÔNG sử dụng markdown."""

IMAGE_TO_VIDEO_INSTRUCTION = """Bạn là một chuyên gia sáng tạo prompt cho các mô hình AI tạo video như Google Veo. Nhiệm vụ của bạn là phân tích một hình ảnh và một ý tưởng tùy chọn từ người dùng để tạo ra một prompt video chi tiết, sống động. Prompt cuối cùng phải là một đoạn văn duy nhất, mạch lạc, bằng tiếng Anh.

1.  **Phân tích hình ảnh:** Xác định chủ thể chính, bối cảnh, phong cách nghệ thuật, ánh sáng và bố cục của hình ảnh.
2.  **Kết hợp ý tưởng:** Nếu người dùng cung cấp ý tưởng, hãy tích hợp nó một cách sáng tạo vào prompt. Ví dụ: nếu hình ảnh là một khu rừng và ý tưởng là "thêm một con rồng", hãy mô tả con rồng trong khu rừng đó. Nếu không có ý tưởng, hãy tạo một hành động hoặc câu chuyện dựa trên hình ảnh.
3.  **Lời thoại:** Nếu người dùng cung cấp lời thoại, PHẢI giữ nguyên văn bằng ngôn ngữ gốc, không dịch, và lồng ghép vào prompt theo đúng thứ tự, gắn với nhân vật phù hợp trong ảnh.
4.  **Xây dựng Prompt:** Tạo một prompt hoàn chỉnh, kết hợp các yếu tố như:
    - **Chủ thể & Hành động:** Mô tả chi tiết chủ thể từ ảnh và hành động được đề xuất.
    - **Môi trường:** Dựa trên bối cảnh của ảnh.
    - **Phong cách hình ảnh:** Dựa trên phong cách của ảnh, nhưng có thể nhấn mạnh thêm (ví dụ: "cinematic, photorealistic, 8K").
    - **Máy quay & Cảnh quay:** Đề xuất các chuyển động máy quay động (ví dụ: "a slow panning shot revealing...", "an epic aerial drone shot").
    - **Ánh sáng:** Mô tả ánh sáng trong ảnh.

KHÔNG sử dụng markdown. Chỉ trả về một đoạn văn tiếng Anh duy nhất."""


class StructuredVideoTemplate(PromptTemplate[StructuredVideoRequest]):
    """Video prompt from idea, setting, styles and characters with dialogue."""

    @property
    def name(self) -> str:
        return "structured_video"

    @property
    def system_instruction(self) -> str:
        return STRUCTURED_VIDEO_INSTRUCTION

    def render(self, request: StructuredVideoRequest) -> Contents:
        style = ", ".join(request.styles) or FALLBACK_VIDEO_STYLE
        lines = [
            "Please generate a Veo prompt based on the following details:",
            f'- Main Idea: "{request.main_idea}"',
            f'- Setting: "{or_fallback(request.setting, FALLBACK_SETTING)}"',
            f'- Visual Style: "{style}"',
            f'- Characters and Dialogue: "{characters_with_dialogue(request.characters)}"',
        ]
        return "\n".join(lines) + "\n"


class FreestyleVideoTemplate(PromptTemplate[FreestyleVideoRequest]):
    """Video prompt from a free-form scene description."""

    @property
    def name(self) -> str:
        return "freestyle_video"

    @property
    def system_instruction(self) -> str:
        return FREESTYLE_VIDEO_INSTRUCTION

    def render(self, request: FreestyleVideoRequest) -> Contents:
        return (
            "Please generate a Veo prompt based on the following free-form description.\n"
            "Keep any dialogue exactly as written.\n"
            "Description:\n"
            f'"""\n{request.raw_text.strip()}\n"""\n'
        )


class ImageToVideoTemplate(PromptTemplate[ImageToVideoRequest]):
    """Video prompt from an uploaded image plus an optional idea and dialogue."""

    @property
    def name(self) -> str:
        return "image_to_video"

    @property
    def system_instruction(self) -> str:
        return IMAGE_TO_VIDEO_INSTRUCTION

    def render(self, request: ImageToVideoRequest) -> Contents:
        idea = or_fallback(request.supplemental_idea, FALLBACK_IMAGE_IDEA)
        text = f'Ý tưởng bổ sung của người dùng: "{idea}"'

        dialogues = [d.strip() for d in request.dialogues if d and d.strip()]
        if dialogues:
            text += "\nLời thoại (giữ nguyên văn, không dịch):"
            text += "".join(f'\n- "{line}"' for line in dialogues)

        return [request.image, text]
