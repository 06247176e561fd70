import pytest
from fastapi.testclient import TestClient
from types import SimpleNamespace

from main import app
from db.catalog import MajorCatalog, get_catalog
from gpt.client import get_llm_client
from models.major import Major


def build_major(**overrides) -> Major:
    """Build a Major from camelCase fields, filling the required ones with defaults."""
    data = {
        "majorName": "计算机科学与技术",
        "majorCode": "080901",
        "university": "北京大学",
        "region": "北京",
        "province": "北京",
        "universityTier": "985",
        "universityLevel": "本科",
        "universityType": "公办",
        "majorCategory": "工学",
        "schoolingLength": "4年",
        "tuition": 5500,
        "subjectRequirements": "物理",
    }
    data.update(overrides)
    return Major.model_validate(data)


class FakeChatCompletions:
    """Replays canned responses for client.chat.completions.create and records each call."""

    def __init__(self, responses):
        self.responses = list(responses)
        self.calls = []

    async def create(self, **kwargs):
        self.calls.append({**kwargs, "messages": list(kwargs["messages"])})
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


class FakeLLMClient:
    def __init__(self, responses):
        self.chat = SimpleNamespace(completions=FakeChatCompletions(responses))

    @property
    def calls(self):
        return self.chat.completions.calls


def completion(content=None, tool_calls=None):
    message = SimpleNamespace(content=content, tool_calls=tool_calls)
    return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def tool_call(call_id, arguments, name="getMajorRecommendations"):
    return SimpleNamespace(
        id=call_id,
        type="function",
        function=SimpleNamespace(name=name, arguments=arguments),
    )


@pytest.fixture
def make_major():
    return build_major


@pytest.fixture
def sample_majors():
    """A small catalog covering the filter, sort and subject edge cases."""
    return [
        build_major(admissionScore2024=701, admissionRanking2024=40),
        build_major(
            majorName="软件工程", majorCode="080902", university="清华大学",
            tuition=5000, subjectRequirements="物理+化学",
            admissionScore2024=699, admissionRanking2024=50,
        ),
        build_major(
            majorName="英语", majorCode="050201", university="浙江大学",
            region="杭州", province="浙江", majorCategory="文学",
            tuition=4800, subjectRequirements="不限",
            admissionScore2024=660, admissionRanking2024=300,
        ),
        build_major(
            majorName="临床医学", majorCode="100201", university="复旦大学",
            region="上海", province="上海", majorCategory="医学",
            schoolingLength="5年", tuition=6500, subjectRequirements="化学+生物",
            admissionScore2024=None, admissionRanking2024=None,
        ),
        build_major(
            majorName="美术学", majorCode="130401", university="中国美术学院",
            region="杭州", province="浙江", universityTier="艺术类", majorCategory="艺术学",
            tuition=None, subjectRequirements="不限(艺术)",
            admissionScore2024=600, admissionRanking2024=2000,
        ),
        build_major(
            majorName="工商管理", majorCode="120201", university="宁波诺丁汉大学",
            region="宁波", province="浙江", universityTier="普通本科", universityType="中外合作",
            majorCategory="管理学", tuition=90000, subjectRequirements="历史/政治均可",
            hasPostgraduateRecommendation=False,
            admissionScore2024=620, admissionRanking2024=8000,
        ),
        build_major(
            university="浙江大学", region="杭州", province="浙江", tuition=6000,
            admissionScore2024=690, admissionRanking2024=120,
        ),
    ]


@pytest.fixture
def sample_catalog(sample_majors):
    return MajorCatalog(sample_majors)


@pytest.fixture
def fake_llm():
    """Fake async OpenAI client factory plus helpers for building its responses."""
    return SimpleNamespace(client=FakeLLMClient, completion=completion, tool_call=tool_call)


@pytest.fixture
def client(sample_catalog):
    """Create a test client backed by the sample catalog and no LLM configured."""
    app.dependency_overrides[get_catalog] = lambda: sample_catalog
    app.dependency_overrides[get_llm_client] = lambda: None
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def client_with_llm(sample_catalog):
    """Create a test client whose LLM dependency is replaced by the returned setter."""
    app.dependency_overrides[get_catalog] = lambda: sample_catalog

    def use(fake_client):
        app.dependency_overrides[get_llm_client] = lambda: fake_client
        return TestClient(app)

    yield use
    app.dependency_overrides.clear()
