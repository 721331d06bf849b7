"""Character description from a reference image."""

from ..models import CharacterAnalysisRequest
from .base import Contents, PromptTemplate

CHARACTER_ANALYSIS_INSTRUCTION = """Bạn là một chuyên gia thiết kế nhân vật cho phim và hoạt hình. Nhiệm vụ của bạn là quan sát nhân vật chính trong hình ảnh và viết một đoạn mô tả ngắn gọn để dùng lại khi tạo video hoặc ảnh, giúp nhân vật luôn nhất quán giữa các cảnh.

**YÊU CẦU:**
1.  **Ngôn ngữ:** Viết bằng **tiếng Việt**.
2.  **Nội dung:** Mô tả giới tính, độ tuổi ước lượng, vóc dáng, khuôn mặt, kiểu tóc và màu tóc, trang phục, phụ kiện, và thần thái hoặc tính cách toát ra từ nhân vật.
3.  **Chỉ mô tả những gì nhìn thấy:** Không bịa thêm tên, tiểu sử hay bối cảnh. Không mô tả phông nền.
4.  **Định dạng:** Chỉ trả về một đoạn văn duy nhất, tối đa khoảng 60 từ. KHÔNG sử dụng markdown."""

ANALYSIS_REQUEST_TEXT = "Hãy mô tả nhân vật chính trong hình ảnh này."


class CharacterAnalysisTemplate(PromptTemplate[CharacterAnalysisRequest]):
    """Library helper: describe the character shown in an image."""

    @property
    def name(self) -> str:
        return "character_analysis"

    @property
    def system_instruction(self) -> str:
        return CHARACTER_ANALYSIS_INSTRUCTION

    def render(self, request: CharacterAnalysisRequest) -> Contents:
        return [request.image, ANALYSIS_REQUEST_TEXT]
