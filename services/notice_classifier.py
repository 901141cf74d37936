import re
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Pattern, Tuple


class Category(str, Enum):
    TAX_RECEIPT = "TAX_RECEIPT"
    PAYMENT_REQUEST = "PAYMENT_REQUEST"
    AUTH_MESSAGE = "AUTH_MESSAGE"
    PROCESS_RESULT = "PROCESS_RESULT"
    GENERAL_NOTICE = "GENERAL_NOTICE"


@dataclass(frozen=True)
class Explanation:
    definition: str
    importance: str
    action: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "definition": self.definition,
            "importance": self.importance,
            "action": self.action,
        }


MIN_TEXT_LENGTH = 5

# 우선순위 순서 그대로 유지 (먼저 걸리는 규칙이 이김)
CATEGORY_KEYWORDS: List[Tuple[Category, Tuple[str, ...]]] = [
    (Category.TAX_RECEIPT, ("현금영수증", "국세청", "세무서", "홈택스")),
    (Category.PAYMENT_REQUEST, ("납부", "기한", "미납", "요청", "청구", "연체")),
    (Category.AUTH_MESSAGE, ("인증", "코드", "번호", "확인번호", "OTP")),
    (Category.PROCESS_RESULT, ("취소", "환불", "처리되었습니다", "완료")),
]

_RULES: List[Tuple[Category, Pattern[str]]] = [
    (category, re.compile("|".join(re.escape(k) for k in keywords)))
    for category, keywords in CATEGORY_KEYWORDS
]

EXPLANATIONS: Dict[Category, Explanation] = {
    Category.TAX_RECEIPT: Explanation(
        definition="국세청(홈택스)이나 세무서에서 보낸 현금영수증·세금 관련 안내입니다.",
        importance="소득공제나 세액공제, 세금 신고에 쓰이는 기록이라 보관해 두면 좋습니다.",
        action="홈택스 앱이나 누리집에서 발급 내역을 확인하고, 내 것이 아니면 세무서(국번 없이 126)에 문의하세요.",
    ),
    Category.PAYMENT_REQUEST: Explanation(
        definition="요금이나 대금을 정해진 기한까지 내 달라는 납부·청구 안내입니다.",
        importance="기한을 넘기면 연체료가 붙거나 서비스가 중단될 수 있습니다.",
        action="납부 금액과 기한을 확인하고, 보낸 곳의 공식 번호로 직접 확인한 뒤 납부하세요. 문자 속 링크로는 결제하지 마세요.",
    ),
    Category.AUTH_MESSAGE: Explanation(
        definition="본인 확인을 위해 보내는 인증번호(확인 코드) 메시지입니다.",
        importance="인증번호를 남에게 알려 주면 계정이나 돈을 빼앗길 수 있습니다.",
        action="직접 요청한 인증이 맞을 때만 입력하고, 전화나 문자로 번호를 알려 달라는 요구는 거절하세요.",
    ),
    Category.PROCESS_RESULT: Explanation(
        definition="신청하신 취소·환불 등의 처리가 끝났다는 결과 안내입니다.",
        importance="처리 결과가 내가 요청한 내용과 같은지 확인해야 손해를 막을 수 있습니다.",
        action="금액과 처리 날짜를 확인하고, 요청한 적이 없거나 금액이 다르면 해당 기관 고객센터에 문의하세요.",
    ),
    Category.GENERAL_NOTICE: Explanation(
        definition="일반적인 알림이나 안내 문서입니다.",
        importance="당장 해야 할 일은 없을 수 있지만 날짜나 조건이 적혀 있는지 살펴보세요.",
        action="내용이 헷갈리면 보낸 기관에 공식 연락처로 문의하거나 가족에게 함께 확인해 달라고 하세요.",
    ),
}

UNRECOGNIZED_EXPLANATION = Explanation(
    definition="사진에서 글자를 충분히 읽지 못했습니다.",
    importance="내용을 알 수 없어서 어떤 안내인지 판단할 수 없습니다.",
    action="밝은 곳에서 글자가 잘 보이도록 문서를 다시 찍어 올려 주세요.",
)


def detect_category(text: Optional[str]) -> Optional[Category]:
    """
    인식된 텍스트의 분류를 반환.
    텍스트가 비어 있거나 너무 짧으면 None (인식 불가).
    """
    t = (text or "").strip()
    if len(t) < MIN_TEXT_LENGTH:
        return None
    for category, pattern in _RULES:
        if pattern.search(t):
            return category
    return Category.GENERAL_NOTICE


def classify(text: Optional[str]) -> Explanation:
    category = detect_category(text)
    if category is None:
        return UNRECOGNIZED_EXPLANATION
    return EXPLANATIONS[category]
