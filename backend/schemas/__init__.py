from schemas.auth import (SignupInput, LoginInput, UserInfo, AuthResponse, MeResponse, PlanChangeInput,
                          ContactSalesInput, ContactSalesResponse)
from schemas.analysis import (TextAnalysisInput, SaveAnalysisInput, CompareInput, ShareUpdateInput,
                              ShareResponse)
